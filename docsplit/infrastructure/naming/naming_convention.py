"""Standardised filenames for split-out documents."""
from __future__ import annotations

import re
import time
import unicodedata
from typing import Dict, Optional

from docsplit.domain.value_objects.document_type import DocumentType

FILENAME_PREFIXES: Dict[DocumentType, str] = {
    DocumentType.TAX_CERTIFICATE: "SAT_Constancia",
    DocumentType.INCORPORATION_DEED: "Acta_Constitutiva",
    DocumentType.ATTENDEE_LIST: "Lista_Asistentes",
    DocumentType.NATIONAL_ID: "INE",
    DocumentType.PASSPORT: "Passport",
    DocumentType.UTILITY_BILL_CFE: "CFE_Recibo",
    DocumentType.UTILITY_BILL_TELMEX: "Telmex_Recibo",
    DocumentType.BANK_STATEMENT: "Estado_Cuenta",
    DocumentType.UNKNOWN: "Unknown_Doc",
}

# "Acta_Constitutiva_alejandro-karam.pdf" -> "alejandro-karam"
_ORIGINAL_SUFFIX = re.compile(r"_([a-zA-Z0-9-]+)\.")


def canonicalize_name(name: str) -> str:
    """Upper-case, strip accents and collapse whitespace."""

    decomposed = unicodedata.normalize("NFD", name.upper())
    without_marks = "".join(char for char in decomposed if unicodedata.category(char) != "Mn")
    return " ".join(without_marks.split())


def standardized_filename(
    document_type: DocumentType,
    entity_name: Optional[str],
    tax_id: Optional[str],
    original_filename: str,
) -> str:
    """Build ``<prefix>_<identifier>.pdf`` for a segment.

    The identifier is the holder name when known, else the tax id, else a
    token taken from the original filename, else a timestamp.
    """

    prefix = FILENAME_PREFIXES.get(DocumentType.from_label(document_type), "Doc")
    identifier = ""

    if entity_name:
        canonical = re.sub(r"[^A-Z0-9\s]", "", canonicalize_name(entity_name))
        identifier = re.sub(r"\s+", "_", canonical.strip())
    if not identifier and tax_id:
        identifier = re.sub(r"[^A-Z0-9]", "", tax_id.upper())
    if not identifier:
        match = _ORIGINAL_SUFFIX.search(original_filename or "")
        if match:
            identifier = match.group(1)
        else:
            identifier = f"Extracted_{int(time.time() * 1000)}"

    return f"{prefix}_{identifier}.pdf"
