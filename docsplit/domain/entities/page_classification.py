"""
Domain Entity: PageClassification

One classifier judgment for one page of a bundle.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from docsplit.domain.value_objects.confidence import Confidence
from docsplit.domain.value_objects.document_type import DocumentType


@dataclass(frozen=True)
class PageClassification:
    """
    Immutable per-page judgment produced by the page classifier.

    Business rules:
    - Page numbers are 1-indexed
    - Confidence is an integer in [0, 100]
    - ``unknown`` is a regular document type, not an error
    - ``reasoning`` is kept for audit only and never drives decisions
    """

    page_number: int
    document_type: DocumentType
    confidence: int
    extracted_name: Optional[str] = None
    extracted_tax_id: Optional[str] = None
    is_first_page: bool = False
    is_last_page: bool = False
    printed_page_index: Optional[int] = None
    printed_page_count: Optional[int] = None
    reasoning: str = ""

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if not isinstance(self.document_type, DocumentType):
            object.__setattr__(self, 'document_type', DocumentType.from_label(self.document_type))
        object.__setattr__(self, 'confidence', Confidence.from_raw(self.confidence).value)

    # ==================== Factory Methods ====================

    @classmethod
    def degraded(cls, page_number: int, reason: str) -> PageClassification:
        """Placeholder used when the classifier could not judge the page."""
        return cls(
            page_number=page_number,
            document_type=DocumentType.UNKNOWN,
            confidence=0,
            is_first_page=False,
            is_last_page=False,
            reasoning=reason,
        )

    # ==================== Queries ====================

    @property
    def is_degraded(self) -> bool:
        return self.document_type.is_unknown and self.confidence == 0

    @property
    def has_tax_id(self) -> bool:
        return bool(self.extracted_tax_id and self.extracted_tax_id.strip())

    def normalized_tax_id(self) -> Optional[str]:
        if not self.has_tax_id:
            return None
        return self.extracted_tax_id.strip().upper()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_number": self.page_number,
            "document_type": self.document_type.value,
            "confidence": self.confidence,
            "extracted_name": self.extracted_name,
            "extracted_tax_id": self.extracted_tax_id,
            "is_first_page": self.is_first_page,
            "is_last_page": self.is_last_page,
            "printed_page_index": self.printed_page_index,
            "printed_page_count": self.printed_page_count,
            "reasoning": self.reasoning,
        }
