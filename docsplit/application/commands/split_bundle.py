"""SplitBundle Command - Orchestrates bundle segmentation end to end.

High-level orchestration only; the page classifier, PDF utilities and
materializer are injected so the flow can be exercised without a model.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from docsplit.application.dto.split_result_dto import SplitResult
from docsplit.application.services.batch_scheduler import BatchScheduler
from docsplit.constants import DEFAULT_WINDOW_SIZE
from docsplit.domain.services.segmentation_engine import SegmentationEngine
from docsplit.infrastructure.pdf.page_extractor import PageExtractor
from docsplit.infrastructure.pdf.segment_materializer import SegmentMaterializer
from docsplit.infrastructure.vision.azure_vision_client import PageClassifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitBundleCommand:
    pdf_path: str
    output_dir: str
    window_size: Optional[int] = None


class SplitBundleHandler:
    """Handles SplitBundle commands."""

    def __init__(
        self,
        classifier: PageClassifier,
        *,
        page_extractor: Optional[PageExtractor] = None,
        engine: Optional[SegmentationEngine] = None,
        materializer: Optional[SegmentMaterializer] = None,
        default_window_size: int = DEFAULT_WINDOW_SIZE,
    ):
        self._classifier = classifier
        self._pages = page_extractor or PageExtractor()
        self._engine = engine or SegmentationEngine()
        self._materializer = materializer or SegmentMaterializer()
        self._default_window_size = default_window_size

    def handle(self, command: SplitBundleCommand) -> SplitResult:
        # Bundle-level failures surface here, before any page is classified.
        bundle = self._pages.load_bundle(command.pdf_path)
        logger.info("Analyzing %s pages in %s...", bundle.page_count, bundle.path.name)

        scheduler = BatchScheduler(
            self._classifier,
            page_extractor=self._pages,
            window_size=command.window_size or self._default_window_size,
        )
        classifications = scheduler.classify_all(bundle.data, bundle.page_count)
        degraded = sum(1 for page in classifications if page.is_degraded)
        if degraded:
            logger.warning("%s of %s pages could not be classified", degraded, bundle.page_count)

        segments = self._engine.segment(classifications)
        outputs = self._materializer.materialize(segments, bundle.path, Path(command.output_dir))

        logger.info(
            "Split %s into %s files (%s segments detected)",
            bundle.path.name,
            len(outputs),
            len(segments),
        )
        return SplitResult(
            original_file=str(bundle.path),
            total_pages=bundle.page_count,
            output_files=outputs,
            segments=segments,
            pages=classifications,
        )
