"""Write closed segments out as standalone PDF files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import fitz  # type: ignore

from docsplit.application.dto.split_result_dto import OutputFileDTO
from docsplit.constants import UNKNOWN_SEGMENT_MIN_SPAN
from docsplit.domain.entities.document_segment import DocumentSegment
from docsplit.domain.exceptions import BundleReadError, SegmentMaterializationError
from docsplit.domain.value_objects.document_type import DocumentType
from docsplit.infrastructure.naming.naming_convention import standardized_filename
from docsplit.infrastructure.pdf.page_extractor import FITZ_LOCK

logger = logging.getLogger(__name__)

NameFor = Callable[[DocumentType, Optional[str], Optional[str], str], str]


class SegmentMaterializer:
    """Copies each segment's page range into its own PDF file."""

    def __init__(self, *, name_for: Optional[NameFor] = None) -> None:
        self._name_for = name_for or standardized_filename

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def materialize(
        self,
        segments: Iterable[DocumentSegment],
        source_pdf_path: Path | str,
        output_dir: Path | str,
    ) -> List[OutputFileDTO]:
        """Write every retained segment and describe what was produced.

        Small ``unknown`` segments are dropped as noise. A segment that
        fails to write is logged and left out; the others still go out.
        """

        source_path = Path(source_pdf_path)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        segments = list(segments)
        logger.info("Splitting %s into %s files...", source_path.name, len(segments))

        outputs: List[OutputFileDTO] = []
        used_names: set[str] = set()

        with FITZ_LOCK:
            try:
                source = fitz.open(source_path)
            except Exception as exc:  # noqa: BLE001 - MuPDF errors do not share a stdlib base
                raise BundleReadError(source_path, f"unreadable PDF ({exc})", exc) from exc

            if source.page_count < 1:
                source.close()
                raise BundleReadError(source_path, "document has no pages")

            with source:
                for segment in segments:
                    if self.should_skip(segment):
                        logger.info(
                            "Skipping small unknown segment (pages %s-%s)",
                            segment.start_page,
                            segment.end_page,
                        )
                        continue

                    try:
                        output = self._write_segment(source, segment, source_path.name, output_dir, used_names)
                    except SegmentMaterializationError as exc:
                        logger.exception("%s", exc)
                        continue

                    logger.info(
                        "Saved %s (%s, pages %s-%s)",
                        output.path.name,
                        segment.document_type.value,
                        segment.start_page,
                        segment.end_page,
                    )
                    outputs.append(output)

        return outputs

    @staticmethod
    def should_skip(segment: DocumentSegment) -> bool:
        """Unknown segments spanning fewer than three pages are treated as noise."""

        start, end = segment.page_range
        return segment.document_type.is_unknown and (end - start) < UNKNOWN_SEGMENT_MIN_SPAN

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _write_segment(
        self,
        source,
        segment: DocumentSegment,
        original_name: str,
        output_dir: Path,
        used_names: set[str],
    ) -> OutputFileDTO:
        start, end = segment.page_range
        try:
            filename = self._name_for(
                segment.document_type,
                segment.metadata.name,
                segment.metadata.tax_id,
                original_name,
            )
            filename = _unique_name(filename, used_names)
            output_path = output_dir / filename

            if end > source.page_count:
                raise ValueError(f"segment ends at page {end}, source has {source.page_count}")

            with fitz.open() as target:
                # PyMuPDF page indices are 0-based.
                target.insert_pdf(source, from_page=start - 1, to_page=end - 1)
                if target.page_count != end - start + 1:
                    raise ValueError(
                        f"copied {target.page_count} pages, expected {end - start + 1}"
                    )
                target.save(output_path)
        except Exception as exc:  # noqa: BLE001 - MuPDF and name_for errors have no common base
            raise SegmentMaterializationError(start, end, exc) from exc

        used_names.add(filename)
        return OutputFileDTO(
            path=output_path,
            document_type=segment.document_type,
            page_range=(start, end),
            metadata=segment.metadata.to_dict(),
        )


def _unique_name(filename: str, used_names: set[str]) -> str:
    if filename not in used_names:
        return filename
    stem, dot, suffix = filename.rpartition(".")
    if not dot:
        stem, suffix = filename, ""
    counter = 2
    while True:
        candidate = f"{stem}_{counter}.{suffix}" if suffix else f"{stem}_{counter}"
        if candidate not in used_names:
            return candidate
        counter += 1
