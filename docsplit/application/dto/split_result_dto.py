"""
Data Transfer Objects describing the outcome of splitting a bundle.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from docsplit.domain.entities.document_segment import DocumentSegment
from docsplit.domain.entities.page_classification import PageClassification
from docsplit.domain.value_objects.document_type import DocumentType


@dataclass(frozen=True)
class OutputFileDTO:
    """One standalone PDF written for a segment."""

    path: Path
    document_type: DocumentType
    page_range: Tuple[int, int]
    metadata: Dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to dictionary."""
        return {
            "path": str(self.path),
            "document_type": self.document_type.value,
            "page_range": list(self.page_range),
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class SplitResult:
    """Files produced from one bundle, plus every segment and page judgment behind them."""

    original_file: str
    total_pages: int
    output_files: List[OutputFileDTO]
    segments: List[DocumentSegment] = field(default_factory=list)
    pages: List[PageClassification] = field(default_factory=list)

    @property
    def dropped_segments(self) -> List[DocumentSegment]:
        written = {output.page_range for output in self.output_files}
        return [segment for segment in self.segments if segment.page_range not in written]

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to dictionary."""
        return {
            "original_file": self.original_file,
            "total_pages": self.total_pages,
            "output_files": [output.to_dict() for output in self.output_files],
            "segments": [segment.to_dict() for segment in self.segments],
            "pages": [page.to_dict() for page in self.pages],
        }
