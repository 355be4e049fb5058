"""Image helpers used by the infrastructure layer."""
from __future__ import annotations

import base64


def image_to_data_url(image_bytes: bytes, mime_type: str = "image/png") -> str:
    """Convert raw image bytes to a data URL suitable for OpenAI Vision."""

    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"
