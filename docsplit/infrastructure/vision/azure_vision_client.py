"""Azure OpenAI vision adapter that classifies single bundle pages."""
from __future__ import annotations

import json
import logging
from typing import Iterable, Optional, Protocol

from azure.identity import DefaultAzureCredential, get_bearer_token_provider
from openai import AzureOpenAI, OpenAIError

from docsplit.config import Settings, get_settings
from docsplit.domain.entities.page_classification import PageClassification
from docsplit.domain.exceptions import ClassificationParseError, ConfigurationError
from docsplit.infrastructure.pdf.image_processor import image_to_data_url
from docsplit.infrastructure.pdf.page_extractor import PageExtractor

from .vision_prompt_builder import VisionPromptAttempt, build_prompt_attempts
from .vision_response_parser import ClassificationResponseParser

logger = logging.getLogger(__name__)


class VisionExtractionError(RuntimeError):
    """Raised when the vision model fails to produce a usable payload."""


class PageClassifier(Protocol):
    def classify(self, page_buffer: bytes, page_index: int, total_pages: int) -> PageClassification: ...


class AzureVisionClient:
    """Classifies one page at a time with an Azure OpenAI vision deployment.

    ``classify`` never raises: any failure is logged and reported as a
    degraded ``unknown`` page with zero confidence.
    """

    def __init__(
        self,
        *,
        client: Optional[AzureOpenAI] = None,
        parser: Optional[ClassificationResponseParser] = None,
        page_extractor: Optional[PageExtractor] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        endpoint = settings.ensure_endpoint()
        model = settings.vision_model()

        if not model:
            raise ConfigurationError("AZURE_OPENAI_VISION_MODEL or AZURE_OPENAI_DEPLOYMENT_NAME must be configured")

        if client is not None:
            self._client = client
        else:
            if not endpoint:
                raise ConfigurationError("AZURE_OPENAI_ENDPOINT must be configured before using the vision client")
            self._client = self._build_client(settings, endpoint)

        self._model = model
        self._parser = parser or ClassificationResponseParser()
        self._pages = page_extractor or PageExtractor(zoom=settings.page_render_zoom)

    @staticmethod
    def _build_client(settings: Settings, endpoint: str) -> AzureOpenAI:
        common = {
            "api_version": settings.azure_openai_api_version,
            "azure_endpoint": endpoint,
            "timeout": settings.azure_openai_timeout_seconds,
            "max_retries": settings.azure_openai_max_retries,
        }
        api_key = settings.azure_openai_api_key
        if api_key:
            return AzureOpenAI(api_key=api_key, **common)

        token_provider = get_bearer_token_provider(
            DefaultAzureCredential(),
            "https://cognitiveservices.azure.com/.default",
        )
        return AzureOpenAI(azure_ad_token_provider=token_provider, **common)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def classify(self, page_buffer: bytes, page_index: int, total_pages: int) -> PageClassification:
        """Classify the single-page PDF ``page_buffer`` (0-based ``page_index``)."""

        page_number = page_index + 1
        try:
            image = self._pages.render_page_png(page_buffer)
            attempts = build_prompt_attempts(page_index, total_pages, image_to_data_url(image))
            payload = self._run_attempts(attempts)
            if payload is None:
                raise VisionExtractionError("No JSON found in response")
            return self._parser.parse_page(page_number, payload)
        except (VisionExtractionError, ClassificationParseError, OpenAIError) as exc:
            logger.error("Error classifying page %s: %s", page_number, exc)
            return PageClassification.degraded(page_number, f"Error: {exc}")
        except Exception as exc:  # noqa: BLE001 - classifier boundary must not raise
            logger.exception("Unexpected failure classifying page %s", page_number)
            return PageClassification.degraded(page_number, f"Error: {exc}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _run_attempts(self, attempts: Iterable[VisionPromptAttempt]) -> Optional[dict]:
        content: Optional[str] = None
        last_attempt_forced_json = False

        for attempt in attempts:
            content, last_attempt_forced_json = self._invoke_model(attempt)
            if content:
                payload = self._extract_json_payload(content)
                if payload is not None:
                    return payload
                logger.debug(
                    "Vision attempt yielded invalid JSON (force_json=%s): %.200s",
                    attempt.force_json,
                    content,
                )

        if content:
            logger.warning(
                "Failed to parse vision payload after retries (force_json=%s).", last_attempt_forced_json
            )
        return None

    def _invoke_model(self, attempt: VisionPromptAttempt) -> tuple[Optional[str], bool]:
        kwargs = {
            "model": self._model,
            "messages": attempt.messages,
            "max_completion_tokens": 2000,
        }
        if attempt.force_json:
            kwargs["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content if response.choices else None
        return content or None, attempt.force_json

    @staticmethod
    def _extract_json_payload(content: str) -> Optional[dict]:
        text = content.strip()
        if not text:
            return None

        try:
            payload = json.loads(text)
            return payload if isinstance(payload, dict) else None
        except json.JSONDecodeError:
            pass

        # Handle fenced code blocks
        if text.startswith("```") and text.endswith("```"):
            body = "\n".join(text.splitlines()[1:-1]).strip()
            if body:
                try:
                    payload = json.loads(body)
                    if isinstance(payload, dict):
                        return payload
                except json.JSONDecodeError:
                    pass

        # Fallback: attempt to locate first JSON object within the text
        start_index = text.find("{")
        end_index = text.rfind("}")
        if start_index != -1 and end_index != -1 and end_index > start_index:
            snippet = text[start_index : end_index + 1]
            try:
                payload = json.loads(snippet)
            except json.JSONDecodeError:
                return None
            return payload if isinstance(payload, dict) else None

        return None
