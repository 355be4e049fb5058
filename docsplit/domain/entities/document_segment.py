"""
Domain Entity: DocumentSegment

A contiguous page range of a bundle that holds exactly one logical
document. Segments are built incrementally while the bundle is scanned
and become immutable once closed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from docsplit.domain.entities.page_classification import PageClassification
from docsplit.domain.exceptions import SegmentClosedError
from docsplit.domain.value_objects.document_type import DocumentType


@dataclass
class SegmentMetadata:
    """Best-known identity of the segment's holder."""

    name: Optional[str] = None
    tax_id: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"name": self.name, "tax_id": self.tax_id, "description": self.description}


@dataclass
class DocumentSegment:
    """
    Page range assigned to a single document type.

    Business rules:
    - Pages are 1-indexed and the range is inclusive
    - ``confidence`` is the highest confidence seen among absorbed pages
    - Type and identity only change when a strictly more confident page arrives
    - A closed segment is never reopened or resized
    """

    document_type: DocumentType
    start_page: int
    confidence: int
    metadata: SegmentMetadata = field(default_factory=SegmentMetadata)
    end_page: Optional[int] = None
    _closed: bool = field(default=False, repr=False)

    def __post_init__(self):
        if self.start_page < 1:
            raise ValueError("start_page must be >= 1")

    # ==================== Lifecycle ====================

    @classmethod
    def open(cls, page: PageClassification) -> DocumentSegment:
        """Start a new segment whose first page is ``page``."""
        return cls(
            document_type=page.document_type,
            start_page=page.page_number,
            confidence=page.confidence,
            metadata=SegmentMetadata(
                name=page.extracted_name,
                tax_id=page.extracted_tax_id,
                description=page.reasoning or None,
            ),
            end_page=page.page_number,
        )

    def absorb(self, page: PageClassification) -> bool:
        """
        Extend the segment with ``page``.

        Returns True when the page was confident enough to update the
        segment's type or identity.
        """
        self._ensure_open()
        self.end_page = page.page_number

        if page.confidence <= self.confidence:
            return False

        self.confidence = page.confidence
        if not page.document_type.is_unknown:
            self.document_type = page.document_type
        if page.extracted_name:
            self.metadata.name = page.extracted_name
        if page.extracted_tax_id:
            self.metadata.tax_id = page.extracted_tax_id
        return True

    def close(self, end_page: int) -> None:
        self._ensure_open()
        if end_page < self.start_page:
            raise ValueError(
                f"end_page {end_page} precedes start_page {self.start_page}"
            )
        self.end_page = end_page
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise SegmentClosedError(self.start_page, self.end_page)

    # ==================== Queries ====================

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def page_count(self) -> int:
        end = self.end_page if self.end_page is not None else self.start_page
        return end - self.start_page + 1

    @property
    def page_range(self) -> Tuple[int, int]:
        end = self.end_page if self.end_page is not None else self.start_page
        return (self.start_page, end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_type": self.document_type.value,
            "start_page": self.start_page,
            "end_page": self.end_page,
            "confidence": self.confidence,
            "metadata": self.metadata.to_dict(),
        }
