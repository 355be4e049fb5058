"""Single-page PDF utilities built on PyMuPDF."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

import fitz  # type: ignore

from docsplit.constants import DEFAULT_RENDER_ZOOM
from docsplit.domain.exceptions import BundleReadError

logger = logging.getLogger(__name__)

# MuPDF keeps a global context; calls from worker threads are serialised.
FITZ_LOCK = threading.RLock()


@dataclass(frozen=True)
class LoadedBundle:
    """A bundle read from disk and checked to contain pages."""

    path: Path
    data: bytes
    page_count: int

    def __post_init__(self) -> None:
        if self.page_count < 1:
            raise ValueError("page_count must be >= 1")
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))


class PageExtractor:
    """Cuts pages out of a bundle and rasterises them for the vision model."""

    def __init__(self, *, zoom: float = DEFAULT_RENDER_ZOOM) -> None:
        self._zoom = zoom

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load_bundle(self, pdf_path: Path | str) -> LoadedBundle:
        """Read the bundle and verify it opens and holds at least one page.

        Every failure is reported as :class:`BundleReadError` so callers can
        abort before any page is classified.
        """

        path = Path(pdf_path)
        if not path.is_file():
            raise BundleReadError(path, "file not found")
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise BundleReadError(path, str(exc), exc) from exc

        try:
            with FITZ_LOCK:
                with fitz.open(stream=data, filetype="pdf") as document:
                    if document.needs_pass:
                        raise BundleReadError(path, "document is password protected")
                    page_count = document.page_count
        except BundleReadError:
            raise
        except (RuntimeError, ValueError) as exc:
            raise BundleReadError(path, f"unreadable PDF ({exc})", exc) from exc

        if page_count < 1:
            raise BundleReadError(path, "document has no pages")

        logger.debug("Loaded bundle %s with %s pages", path, page_count)
        return LoadedBundle(path=path, data=data, page_count=page_count)

    def extract_page(self, pdf_bytes: bytes, page_index: int) -> bytes:
        """Return a standalone single-page PDF for the 0-based ``page_index``."""

        with FITZ_LOCK:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as source:
                if page_index < 0 or page_index >= source.page_count:
                    raise IndexError(
                        f"page index {page_index} out of range for {source.page_count} pages"
                    )
                with fitz.open() as single:
                    single.insert_pdf(source, from_page=page_index, to_page=page_index)
                    return single.tobytes()

    def render_page_png(self, page_bytes: bytes, *, zoom: float | None = None) -> bytes:
        """Rasterise the first page of ``page_bytes`` to PNG."""

        factor = zoom if zoom is not None else self._zoom
        with FITZ_LOCK:
            with fitz.open(stream=page_bytes, filetype="pdf") as document:
                if document.page_count == 0:
                    raise ValueError("page buffer holds no pages")
                page = document.load_page(0)
                matrix = fitz.Matrix(factor, factor)
                pixmap = page.get_pixmap(matrix=matrix, alpha=False)
                return pixmap.tobytes("png")
