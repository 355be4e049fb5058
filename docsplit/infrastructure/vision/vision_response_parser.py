"""Parse Azure OpenAI classification responses into domain entities."""
from __future__ import annotations

from typing import Any, Dict, Optional

from docsplit.domain.entities.page_classification import PageClassification
from docsplit.domain.exceptions import ClassificationParseError
from docsplit.domain.value_objects.confidence import Confidence
from docsplit.domain.value_objects.document_type import DocumentType

_TRUE_STRINGS = {"true", "yes", "1", "si", "sí"}


class ClassificationResponseParser:
    """Converts raw, loosely typed model payloads into page classifications."""

    def parse_page(self, page_number: int, payload: Any) -> PageClassification:
        if not isinstance(payload, dict):
            raise ClassificationParseError(
                f"Expected a JSON object for page {page_number}, got {type(payload).__name__}"
            )

        return PageClassification(
            page_number=page_number,
            document_type=DocumentType.from_label(_safe_str(payload.get("document_type"))),
            confidence=Confidence.from_raw(_absent_if_null(payload.get("confidence"))).value,
            extracted_name=_safe_str(_first_present(payload, "extracted_name", "name")),
            extracted_tax_id=_safe_str(_first_present(payload, "extracted_tax_id", "extracted_rfc", "rfc")),
            is_first_page=_safe_bool(payload.get("is_first_page")),
            is_last_page=_safe_bool(payload.get("is_last_page")),
            printed_page_index=_safe_int(_first_present(payload, "detected_page_number", "printed_page_index")),
            printed_page_count=_safe_int(_first_present(payload, "total_pages_in_doc", "printed_page_count")),
            reasoning=_safe_str(payload.get("reasoning")) or "",
        )


def _first_present(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = _absent_if_null(payload.get(key))
        if value is not None:
            return value
    return None


def _absent_if_null(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in {"null", "none", ""}:
        return None
    return value


def _safe_str(value: Any) -> Optional[str]:
    value = _absent_if_null(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _safe_int(value: Any) -> Optional[int]:
    value = _absent_if_null(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(str(value).strip())) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _safe_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False
