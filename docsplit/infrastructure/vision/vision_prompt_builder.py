"""Utilities for constructing Azure OpenAI page-classification prompts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from docsplit.domain.value_objects.document_type import DocumentType

ALLOWED_LABELS = [document_type.value for document_type in DocumentType]

DEFAULT_PROMPT_TEMPLATE = (
    "You are an expert KYC document triage system. You receive one page of a PDF that bundles several"
    " unrelated Mexican legal and financial documents back to back. Identify which document this page"
    " belongs to and extract the metadata needed to split the bundle. Return structured JSON only.\n"
    "Identification rules:\n"
    "1. SAT Constancia (Constancia de Situacion Fiscal): look for \"CONSTANCIA DE SITUACION FISCAL\", RFC,"
    " Cedula de Identificacion Fiscal (QR code grid). Extract the Name/Razon Social and RFC.\n"
    "2. Acta Constitutiva: look for \"TESTIMONIO\", \"ESCRITURA PUBLICA\", notary seals,"
    " \"Sociedad Anonima\", \"Constitucion de Sociedad\".\n"
    "3. Lista de Asistentes: look for \"Lista de Asistentes\", \"Asamblea General\", a table with"
    " \"Accionista\", \"Acciones\", \"Valor\".\n"
    "4. INE / Passport: identity documents.\n"
    "5. Utility bills (CFE / Telmex): look for logos and service details.\n"
    "6. Bank statements: account statements with balances and movements.\n"
    "Use this exact JSON schema for your response: {\n"
    f"  \"document_type\": string from {ALLOWED_LABELS},\n"
    "  \"confidence\": integer between 0 and 100,\n"
    "  \"extracted_name\": string or null (person or company name, crucial for SAT),\n"
    "  \"extracted_tax_id\": string or null (RFC if visible, crucial for SAT),\n"
    "  \"is_first_page\": boolean (does this look like the first page of a document?),\n"
    "  \"is_last_page\": boolean (does this look like the last page, e.g. signature page or end of list?),\n"
    "  \"detected_page_number\": integer or null (X when the page shows \"Pagina X de Y\"),\n"
    "  \"total_pages_in_doc\": integer or null (Y when the page shows \"Pagina X de Y\"),\n"
    "  \"reasoning\": string (brief explanation)\n"
    "}.\n"
    "Do not add commentary. If the page cannot be identified return"
    " {\"document_type\":\"unknown\",\"confidence\":0,\"extracted_name\":null,\"extracted_tax_id\":null,"
    "\"is_first_page\":false,\"is_last_page\":false,\"detected_page_number\":null,"
    "\"total_pages_in_doc\":null,\"reasoning\":\"\"}."
)


@dataclass(frozen=True)
class VisionPromptAttempt:
    """Encapsulates a single attempt payload for the vision model."""

    messages: List[dict[str, Any]]
    force_json: bool


def build_prompt_attempts(page_index: int, total_pages: int, image_data_url: str) -> List[VisionPromptAttempt]:
    """Construct prompt attempts for a page image.

    ``page_index`` is 0-based; the prompt shows the 1-based position so the
    model can use it as context (first page of the file, last page...).
    The model occasionally skips the JSON format, so the first attempt forces
    JSON output and the later ones relax it.
    """

    position = f"Page {page_index + 1} of {total_pages} in the file"

    base_messages = [
        {"role": "system", "content": DEFAULT_PROMPT_TEMPLATE},
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": f"Analyze this document page ({position}). Identify the document type and metadata.",
                },
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ],
        },
    ]

    relaxed_messages = [
        base_messages[0],
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": (
                        f"Classify this page ({position}) and reply with a single JSON object only."
                        " If the page is blank or unreadable, use document_type \"unknown\" with confidence 0."
                    ),
                },
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ],
        },
    ]

    return [
        VisionPromptAttempt(messages=base_messages, force_json=True),
        VisionPromptAttempt(messages=relaxed_messages, force_json=False),
    ]
