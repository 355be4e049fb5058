"""Bounded-concurrency driver for the page classifier."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from docsplit.constants import DEFAULT_WINDOW_SIZE
from docsplit.domain.entities.page_classification import PageClassification
from docsplit.infrastructure.pdf.page_extractor import PageExtractor
from docsplit.infrastructure.vision.azure_vision_client import PageClassifier

logger = logging.getLogger(__name__)


class BatchScheduler:
    """Classifies every page of a bundle, ``window_size`` pages at a time.

    Pages inside a window run concurrently; the next window starts only
    after the whole current one has settled. Results land in a pre-sized
    list at their page index, so completion order never matters.
    """

    def __init__(
        self,
        classifier: PageClassifier,
        *,
        page_extractor: Optional[PageExtractor] = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> None:
        if window_size < 1:
            raise ValueError("window_size must be >= 1")
        self._classifier = classifier
        self._pages = page_extractor or PageExtractor()
        self._window_size = window_size

    @property
    def window_size(self) -> int:
        return self._window_size

    def classify_all(self, pdf_bytes: bytes, total_pages: int) -> List[PageClassification]:
        results: List[Optional[PageClassification]] = [None] * total_pages

        executor = ThreadPoolExecutor(max_workers=self._window_size, thread_name_prefix="classify")
        try:
            for window_start in range(0, total_pages, self._window_size):
                window = range(window_start, min(window_start + self._window_size, total_pages))
                logger.info("Processing pages %s to %s...", window.start + 1, window.stop)

                futures = {
                    executor.submit(self._classify_page, pdf_bytes, page_index, total_pages): page_index
                    for page_index in window
                }
                wait(futures)
                for future, page_index in futures.items():
                    results[page_index] = future.result()
        finally:
            # In-flight calls are left to drain; their results are discarded on cancel.
            executor.shutdown(wait=True, cancel_futures=True)

        return results  # type: ignore[return-value]

    def _classify_page(self, pdf_bytes: bytes, page_index: int, total_pages: int) -> PageClassification:
        try:
            page_buffer = self._pages.extract_page(pdf_bytes, page_index)
        except Exception as exc:  # noqa: BLE001 - one unreadable page must not abort the bundle
            logger.error("Error extracting page %s: %s", page_index + 1, exc)
            return PageClassification.degraded(page_index + 1, f"Error: {exc}")
        return self._classifier.classify(page_buffer, page_index, total_pages)
