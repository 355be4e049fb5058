"""Vision infrastructure adapters."""

from .azure_vision_client import AzureVisionClient, PageClassifier, VisionExtractionError
from .vision_prompt_builder import build_prompt_attempts, DEFAULT_PROMPT_TEMPLATE
from .vision_response_parser import ClassificationResponseParser

__all__ = [
    "AzureVisionClient",
    "ClassificationResponseParser",
    "PageClassifier",
    "VisionExtractionError",
    "build_prompt_attempts",
    "DEFAULT_PROMPT_TEMPLATE",
]
