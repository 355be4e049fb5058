"""Pytest configuration for docsplit tests.

Ensures the project root is on sys.path so ``docsplit.*`` imports resolve
during test collection, and provides builders for page classifications
and small real PDFs.
"""
from __future__ import annotations

import sys
from pathlib import Path

import fitz  # type: ignore
import pytest

# Add repository root to sys.path for module resolution.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docsplit.domain.entities.page_classification import PageClassification  # noqa: E402
from docsplit.domain.value_objects.document_type import DocumentType  # noqa: E402


def build_page(page_number, document_type=DocumentType.TAX_CERTIFICATE, confidence=90, **kwargs):
    return PageClassification(
        page_number=page_number,
        document_type=document_type,
        confidence=confidence,
        **kwargs,
    )


def build_pages(*specs):
    """Build consecutive pages from ``(document_type, confidence)`` tuples or dicts."""
    pages = []
    for index, spec in enumerate(specs, start=1):
        if isinstance(spec, dict):
            pages.append(build_page(index, **spec))
        else:
            document_type, confidence = spec
            pages.append(build_page(index, document_type, confidence))
    return pages


def write_pdf(path: Path, page_count: int) -> Path:
    document = fitz.open()
    for index in range(page_count):
        page = document.new_page()
        page.insert_text((72, 72), f"Bundle page {index + 1}")
    document.save(path)
    document.close()
    return path


@pytest.fixture
def page_builder():
    return build_page


@pytest.fixture
def pages_builder():
    return build_pages


@pytest.fixture
def pdf_factory(tmp_path):
    def factory(page_count: int, name: str = "bundle.pdf") -> Path:
        return write_pdf(tmp_path / name, page_count)

    return factory
