"""Domain entities."""
from .document_segment import DocumentSegment, SegmentMetadata
from .page_classification import PageClassification

__all__ = ["DocumentSegment", "PageClassification", "SegmentMetadata"]
