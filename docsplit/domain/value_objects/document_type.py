"""
DocumentType value object

Closed set of document labels a bundle page can carry, plus the synonym
table used to map free-text classifier labels onto it.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Pattern, Tuple


class DocumentType(str, Enum):
    """Document labels known to the segmenter."""
    TAX_CERTIFICATE = "tax_certificate"
    INCORPORATION_DEED = "incorporation_deed"
    ATTENDEE_LIST = "attendee_list"
    NATIONAL_ID = "national_id"
    PASSPORT = "passport"
    UTILITY_BILL_CFE = "utility_bill_cfe"
    UTILITY_BILL_TELMEX = "utility_bill_telmex"
    BANK_STATEMENT = "bank_statement"
    UNKNOWN = "unknown"

    @property
    def is_unknown(self) -> bool:
        return self is DocumentType.UNKNOWN

    @classmethod
    def from_label(cls, label: Any) -> DocumentType:
        """
        Map an arbitrary label onto the closed set.

        Hyphens and underscores count as spaces, so ``tax-certificate`` and
        ``tax_certificate`` are the same label. Exact values win first;
        otherwise synonyms are searched case-insensitively in declaration
        order. A synonym must start on a word boundary, and short ones
        (``ine``, ``sat``...) must be whole words. Anything that matches
        nothing becomes ``UNKNOWN``.

        Examples:
            >>> DocumentType.from_label("Constancia de Situación Fiscal")
            <DocumentType.TAX_CERTIFICATE: 'tax_certificate'>
            >>> DocumentType.from_label("recibo de luz")
            <DocumentType.UTILITY_BILL_CFE: 'utility_bill_cfe'>
            >>> DocumentType.from_label("national-id")
            <DocumentType.NATIONAL_ID: 'national_id'>
            >>> DocumentType.from_label(None)
            <DocumentType.UNKNOWN: 'unknown'>
        """
        if isinstance(label, DocumentType):
            return label
        if label is None:
            return cls.UNKNOWN

        normalized = _normalize(str(label))
        if not normalized:
            return cls.UNKNOWN

        for document_type in cls:
            if normalized == _normalize(document_type.value):
                return document_type

        for document_type, patterns in _SYNONYM_PATTERNS:
            if any(pattern.search(normalized) for pattern in patterns):
                return document_type
        return cls.UNKNOWN


# Order matters: the first type whose synonym occurs in the label wins.
DOCUMENT_TYPE_SYNONYMS: Dict[DocumentType, Tuple[str, ...]] = {
    DocumentType.TAX_CERTIFICATE: ("sat", "constancia", "fiscal", "tax certificate"),
    DocumentType.INCORPORATION_DEED: ("acta", "testimonio", "escritura", "incorporation", "deed"),
    DocumentType.ATTENDEE_LIST: ("lista", "asistentes", "attendee"),
    DocumentType.NATIONAL_ID: ("ine", "elector", "national id", "identity card"),
    DocumentType.PASSPORT: ("passport", "pasaporte"),
    DocumentType.UTILITY_BILL_CFE: ("cfe", "luz", "electric", "utility bill a"),
    DocumentType.UTILITY_BILL_TELMEX: ("telmex", "telefono", "teléfono", "phone", "utility bill b"),
    DocumentType.BANK_STATEMENT: ("bank", "banco", "cuenta", "statement"),
}

# Synonyms ending in a word this short must end on a word boundary ("ine" inside "online" is not INE).
_WHOLE_WORD_MAX_LENGTH = 3


def _normalize(label: str) -> str:
    return " ".join(re.sub(r"[-_]", " ", label).lower().split())


def _synonym_pattern(synonym: str) -> Pattern[str]:
    suffix = r"\b" if len(synonym.split()[-1]) <= _WHOLE_WORD_MAX_LENGTH else ""
    return re.compile(r"\b" + re.escape(synonym) + suffix)


_SYNONYM_PATTERNS: List[Tuple[DocumentType, Tuple[Pattern[str], ...]]] = [
    (document_type, tuple(_synonym_pattern(synonym) for synonym in synonyms))
    for document_type, synonyms in DOCUMENT_TYPE_SYNONYMS.items()
]
