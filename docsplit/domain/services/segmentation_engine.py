"""
SegmentationEngine domain service.

Turns the ordered per-page classifier judgments of a bundle into an
ordered list of document segments. The scan is a single forward pass
over the pages with exactly one open segment at a time; each page either
opens a new segment (a boundary) or is absorbed into the open one.

Boundary rules, checked in priority order against the current page and
the page before it:

1. first page of the bundle
2. document type changed to a known type; unknown pages in between do
   not count, so the comparison is against the open segment's type
3. the page says it starts a document, confidently
4. the previous page said it ended a document, confidently
5. same type on both pages but different tax ids
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from docsplit.constants import BOUNDARY_CONFIDENCE_THRESHOLD
from docsplit.domain.entities.document_segment import DocumentSegment
from docsplit.domain.entities.page_classification import PageClassification
from docsplit.domain.value_objects.confidence import Confidence
from docsplit.domain.value_objects.document_type import DocumentType

logger = logging.getLogger(__name__)


class BoundaryReason(str, Enum):
    """Rule that opened a segment."""
    FIRST_PAGE = "first_page"
    TYPE_CHANGE = "type_change"
    EXPLICIT_START = "explicit_start"
    PREVIOUS_END = "previous_end"
    IDENTITY_CHANGE = "identity_change"


@dataclass(frozen=True)
class SegmentationRules:
    """
    Tunable inputs of the boundary rules.

    Attributes:
        confidence_threshold: first/last page flags only count strictly above this
        identity_split_types: types for which differing tax ids force a split;
            ``None`` enables the check for every known type
    """
    confidence_threshold: int = BOUNDARY_CONFIDENCE_THRESHOLD
    identity_split_types: Optional[frozenset] = frozenset({DocumentType.TAX_CERTIFICATE})

    def splits_on_identity(self, document_type: DocumentType) -> bool:
        if document_type.is_unknown:
            return False
        if self.identity_split_types is None:
            return True
        return document_type in self.identity_split_types

    @classmethod
    def from_settings(cls, settings) -> SegmentationRules:
        labels = settings.identity_split_labels()
        if labels is None:
            split_types = None
        else:
            split_types = frozenset(
                document_type
                for document_type in (DocumentType.from_label(label) for label in labels)
                if not document_type.is_unknown
            )
        return cls(
            confidence_threshold=settings.boundary_confidence_threshold,
            identity_split_types=split_types,
        )


@dataclass
class _SegmentationState:
    """Accumulator threaded through the scan."""

    segments: List[DocumentSegment] = field(default_factory=list)
    current: Optional[DocumentSegment] = None
    previous_page: Optional[PageClassification] = None

    def start(self, page: PageClassification) -> None:
        if self.current is not None:
            self.current.close(page.page_number - 1)
            self.segments.append(self.current)
        self.current = DocumentSegment.open(page)

    def finish(self, total_pages: int) -> List[DocumentSegment]:
        if self.current is not None:
            self.current.close(total_pages)
            self.segments.append(self.current)
            self.current = None
        return self.segments


class SegmentationEngine:
    """
    Domain service for bundle segmentation.

    The engine is stateless between calls; every ``segment`` call builds
    its own accumulator, so one instance can be shared.
    """

    def __init__(self, rules: Optional[SegmentationRules] = None):
        self._rules = rules or SegmentationRules()

    @property
    def rules(self) -> SegmentationRules:
        return self._rules

    def segment(self, pages: Sequence[PageClassification]) -> List[DocumentSegment]:
        """
        Partition ``pages`` into contiguous segments covering 1..N.

        Args:
            pages: classifier output ordered by page number, starting at 1

        Returns:
            Closed segments in page order. Empty input yields an empty list.

        Raises:
            ValueError: if page numbers are not exactly 1..N in order
        """
        pages = list(pages)
        self._validate_order(pages)

        state = _SegmentationState()
        for page in pages:
            open_type = state.current.document_type if state.current is not None else None
            reason = self.boundary_reason(page, state.previous_page, open_type)
            if reason is not None:
                state.start(page)
                logger.debug(
                    "Segment boundary at page %s (%s, %s)",
                    page.page_number,
                    reason.value,
                    page.document_type.value,
                )
            elif state.current.absorb(page):
                logger.debug(
                    "Page %s raised segment %s confidence to %s",
                    page.page_number,
                    state.current.start_page,
                    page.confidence,
                )
            state.previous_page = page

        segments = state.finish(len(pages))
        logger.info(
            "Segmented %s pages into %s segments: %s",
            len(pages),
            len(segments),
            ", ".join(
                f"{segment.document_type.value}[{segment.start_page}-{segment.end_page}]"
                for segment in segments
            ),
        )
        return segments

    def boundary_reason(
        self,
        page: PageClassification,
        previous: Optional[PageClassification],
        open_type: Optional[DocumentType] = None,
    ) -> Optional[BoundaryReason]:
        """Return the first boundary rule ``page`` triggers, or ``None`` to absorb it.

        ``open_type`` is the type of the segment currently open; when given it
        is the reference for the type-change rule instead of the previous page.
        """
        if previous is None:
            return BoundaryReason.FIRST_PAGE

        threshold = self._rules.confidence_threshold
        reference_type = open_type if open_type is not None else previous.document_type

        if page.document_type != reference_type and not page.document_type.is_unknown:
            return BoundaryReason.TYPE_CHANGE

        if page.is_first_page and Confidence(page.confidence).is_high(threshold):
            return BoundaryReason.EXPLICIT_START

        if previous.is_last_page and Confidence(previous.confidence).is_high(threshold):
            return BoundaryReason.PREVIOUS_END

        if self._identity_changed(page, previous):
            return BoundaryReason.IDENTITY_CHANGE

        return None

    def _identity_changed(self, page: PageClassification, previous: PageClassification) -> bool:
        if page.document_type != previous.document_type:
            return False
        if not self._rules.splits_on_identity(page.document_type):
            return False
        current_id = page.normalized_tax_id()
        previous_id = previous.normalized_tax_id()
        return current_id is not None and previous_id is not None and current_id != previous_id

    @staticmethod
    def _validate_order(pages: Iterable[PageClassification]) -> None:
        for expected, page in enumerate(pages, start=1):
            if page.page_number != expected:
                raise ValueError(
                    f"Page classifications must be ordered 1..N; expected page {expected}, got {page.page_number}"
                )
