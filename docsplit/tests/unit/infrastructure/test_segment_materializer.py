from unittest.mock import MagicMock

import fitz  # type: ignore
import pytest

from docsplit.domain.entities.document_segment import DocumentSegment, SegmentMetadata
from docsplit.domain.exceptions import BundleReadError
from docsplit.domain.value_objects.document_type import DocumentType
from docsplit.infrastructure.pdf.segment_materializer import SegmentMaterializer


def _segment(document_type, start, end, name=None, tax_id=None):
    segment = DocumentSegment(
        document_type=document_type,
        start_page=start,
        confidence=90,
        metadata=SegmentMetadata(name=name, tax_id=tax_id),
    )
    segment.close(end)
    return segment


def _page_texts(path):
    with fitz.open(path) as document:
        return [page.get_text().strip() for page in document]


def test_materialize_writes_each_segment(pdf_factory, tmp_path):
    source = pdf_factory(5, "Bundle_cliente-x.pdf")
    segments = [
        _segment(DocumentType.TAX_CERTIFICATE, 1, 2, name="Grupo Pounj, S.A. de C.V."),
        _segment(DocumentType.INCORPORATION_DEED, 3, 5, tax_id="gpo-010101-ab1"),
    ]

    outputs = SegmentMaterializer().materialize(segments, source, tmp_path / "out")

    assert [output.path.name for output in outputs] == [
        "SAT_Constancia_GRUPO_POUNJ_SA_DE_CV.pdf",
        "Acta_Constitutiva_GPO010101AB1.pdf",
    ]
    assert outputs[0].page_range == (1, 2)
    assert outputs[1].document_type is DocumentType.INCORPORATION_DEED
    assert _page_texts(outputs[0].path) == ["Bundle page 1", "Bundle page 2"]
    assert _page_texts(outputs[1].path) == ["Bundle page 3", "Bundle page 4", "Bundle page 5"]
    assert outputs[0].metadata["name"] == "Grupo Pounj, S.A. de C.V."


def test_small_unknown_segments_are_dropped(pdf_factory, tmp_path):
    source = pdf_factory(6)
    segments = [
        _segment(DocumentType.UNKNOWN, 1, 1),
        _segment(DocumentType.PASSPORT, 2, 3, name="Ana"),
        _segment(DocumentType.UNKNOWN, 4, 5),
        _segment(DocumentType.NATIONAL_ID, 6, 6, name="Luis"),
    ]

    outputs = SegmentMaterializer().materialize(segments, source, tmp_path / "out")

    assert [output.page_range for output in outputs] == [(2, 3), (6, 6)]


def test_large_unknown_segment_is_kept(pdf_factory, tmp_path):
    source = pdf_factory(3, "scan_lote-7.pdf")

    outputs = SegmentMaterializer().materialize(
        [_segment(DocumentType.UNKNOWN, 1, 3)], source, tmp_path / "out"
    )

    assert len(outputs) == 1
    assert outputs[0].path.name == "Unknown_Doc_lote-7.pdf"


def test_name_collisions_get_suffix(pdf_factory, tmp_path):
    source = pdf_factory(2)
    segments = [
        _segment(DocumentType.TAX_CERTIFICATE, 1, 1, name="ACME"),
        _segment(DocumentType.TAX_CERTIFICATE, 2, 2, name="ACME"),
    ]

    outputs = SegmentMaterializer().materialize(segments, source, tmp_path / "out")

    assert [output.path.name for output in outputs] == [
        "SAT_Constancia_ACME.pdf",
        "SAT_Constancia_ACME_2.pdf",
    ]


def test_failed_segment_is_skipped(pdf_factory, tmp_path):
    source = pdf_factory(3)
    name_for = MagicMock(side_effect=["first.pdf", OSError("disk full"), "third.pdf"])
    segments = [
        _segment(DocumentType.PASSPORT, 1, 1),
        _segment(DocumentType.NATIONAL_ID, 2, 2),
        _segment(DocumentType.BANK_STATEMENT, 3, 3),
    ]

    outputs = SegmentMaterializer(name_for=name_for).materialize(segments, source, tmp_path / "out")

    assert [output.path.name for output in outputs] == ["first.pdf", "third.pdf"]


def test_out_of_range_segment_is_skipped(pdf_factory, tmp_path):
    source = pdf_factory(2)
    segments = [
        _segment(DocumentType.PASSPORT, 1, 2),
        _segment(DocumentType.BANK_STATEMENT, 3, 4),
    ]

    outputs = SegmentMaterializer().materialize(segments, source, tmp_path / "out")

    assert [output.page_range for output in outputs] == [(1, 2)]


def test_name_for_receives_segment_identity(pdf_factory, tmp_path):
    source = pdf_factory(1, "original.pdf")
    name_for = MagicMock(return_value="custom.pdf")

    SegmentMaterializer(name_for=name_for).materialize(
        [_segment(DocumentType.PASSPORT, 1, 1, name="Ana", tax_id="RFC1")], source, tmp_path / "out"
    )

    name_for.assert_called_once_with(DocumentType.PASSPORT, "Ana", "RFC1", "original.pdf")


def test_unreadable_source_is_fatal(tmp_path):
    source = tmp_path / "broken.pdf"
    source.write_text("not a pdf")

    with pytest.raises(BundleReadError):
        SegmentMaterializer().materialize(
            [_segment(DocumentType.PASSPORT, 1, 1)], source, tmp_path / "out"
        )


def test_failed_save_does_not_stop_later_segments(pdf_factory, tmp_path):
    source = pdf_factory(3)
    # The nested directory does not exist, so PyMuPDF fails inside save().
    name_for = MagicMock(side_effect=["a.pdf", "no/such/dir/b.pdf", "c.pdf"])
    segments = [
        _segment(DocumentType.PASSPORT, 1, 1),
        _segment(DocumentType.NATIONAL_ID, 2, 2),
        _segment(DocumentType.BANK_STATEMENT, 3, 3),
    ]

    outputs = SegmentMaterializer(name_for=name_for).materialize(segments, source, tmp_path / "out")

    assert [output.path.name for output in outputs] == ["a.pdf", "c.pdf"]
    assert (tmp_path / "out" / "c.pdf").exists()


def test_name_for_lookup_error_skips_only_that_segment(pdf_factory, tmp_path):
    source = pdf_factory(2)
    name_for = MagicMock(side_effect=[KeyError("passport"), "second.pdf"])
    segments = [
        _segment(DocumentType.PASSPORT, 1, 1),
        _segment(DocumentType.NATIONAL_ID, 2, 2),
    ]

    outputs = SegmentMaterializer(name_for=name_for).materialize(segments, source, tmp_path / "out")

    assert [output.path.name for output in outputs] == ["second.pdf"]
