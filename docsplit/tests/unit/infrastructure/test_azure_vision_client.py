"""
Unit tests for the Azure vision page classifier.

The OpenAI client and the page renderer are mocked; only the classifier's
own retry, parsing and degradation behaviour is exercised.
"""
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from openai import APITimeoutError

from docsplit.config import Settings
from docsplit.domain.exceptions import ConfigurationError
from docsplit.domain.value_objects.document_type import DocumentType
from docsplit.infrastructure.vision.azure_vision_client import AzureVisionClient


def _response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def settings():
    return Settings(
        AZURE_OPENAI_ENDPOINT="https://example.openai.azure.com",
        AZURE_OPENAI_DEPLOYMENT_NAME="gpt-vision",
        AZURE_OPENAI_API_KEY="test-key",
    )


@pytest.fixture
def page_extractor():
    extractor = MagicMock()
    extractor.render_page_png.return_value = b"\x89PNG fake"
    return extractor


@pytest.fixture
def openai_client():
    return MagicMock()


@pytest.fixture
def classifier(openai_client, page_extractor, settings):
    return AzureVisionClient(client=openai_client, page_extractor=page_extractor, settings=settings)


def test_classify_parses_model_payload(classifier, openai_client):
    openai_client.chat.completions.create.return_value = _response(
        json.dumps(
            {
                "document_type": "INE",
                "confidence": 91,
                "extracted_name": "JUAN PEREZ",
                "extracted_tax_id": None,
                "is_first_page": True,
                "is_last_page": True,
                "detected_page_number": None,
                "total_pages_in_doc": None,
                "reasoning": "Voter card",
            }
        )
    )

    page = classifier.classify(b"%PDF-single", page_index=2, total_pages=10)

    assert page.page_number == 3
    assert page.document_type is DocumentType.NATIONAL_ID
    assert page.confidence == 91
    assert page.extracted_name == "JUAN PEREZ"
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-vision"
    assert kwargs["response_format"] == {"type": "json_object"}


def test_classify_retries_with_relaxed_prompt(classifier, openai_client):
    openai_client.chat.completions.create.side_effect = [
        _response("I cannot answer in JSON"),
        _response("```json\n{\"document_type\": \"telmex\", \"confidence\": 70, \"reasoning\": \"logo\"}\n```"),
    ]

    page = classifier.classify(b"%PDF-single", 0, 1)

    assert page.document_type is DocumentType.UTILITY_BILL_TELMEX
    assert openai_client.chat.completions.create.call_count == 2
    second_kwargs = openai_client.chat.completions.create.call_args_list[1].kwargs
    assert "response_format" not in second_kwargs


def test_classify_degrades_when_no_json(classifier, openai_client):
    openai_client.chat.completions.create.return_value = _response("no structured answer")

    page = classifier.classify(b"%PDF-single", 4, 5)

    assert page.page_number == 5
    assert page.document_type is DocumentType.UNKNOWN
    assert page.confidence == 0
    assert page.is_first_page is False
    assert page.is_last_page is False
    assert page.reasoning.startswith("Error:")


def test_classify_degrades_on_api_timeout(classifier, openai_client):
    openai_client.chat.completions.create.side_effect = APITimeoutError(request=MagicMock())

    page = classifier.classify(b"%PDF-single", 0, 3)

    assert page.is_degraded
    assert page.page_number == 1


def test_classify_degrades_on_render_failure(classifier, page_extractor, openai_client):
    page_extractor.render_page_png.side_effect = RuntimeError("cannot open broken document")

    page = classifier.classify(b"garbage", 1, 3)

    assert page.is_degraded
    assert "cannot open broken document" in page.reasoning
    openai_client.chat.completions.create.assert_not_called()


def test_classify_degrades_on_non_object_json(classifier, openai_client):
    openai_client.chat.completions.create.return_value = _response("[1, 2, 3]")

    page = classifier.classify(b"%PDF-single", 0, 1)

    assert page.is_degraded


def test_missing_model_configuration_raises(page_extractor):
    settings = Settings(AZURE_OPENAI_ENDPOINT="https://example.openai.azure.com")
    settings.azure_openai_deployment_name = None
    settings.azure_openai_vision_model = None

    with pytest.raises(ConfigurationError):
        AzureVisionClient(client=MagicMock(), page_extractor=page_extractor, settings=settings)


def test_missing_endpoint_raises_without_injected_client(page_extractor):
    settings = Settings(AZURE_OPENAI_DEPLOYMENT_NAME="gpt-vision")
    settings.azure_openai_endpoint = ""

    with pytest.raises(ConfigurationError):
        AzureVisionClient(page_extractor=page_extractor, settings=settings)


@pytest.mark.parametrize(
    "content, expected",
    [
        ('{"a": 1}', {"a": 1}),
        ('```json\n{"a": 2}\n```', {"a": 2}),
        ('Here you go: {"a": 3} thanks', {"a": 3}),
        ("```json\n[1, 2]\n```", None),
        ("", None),
        ("no json", None),
    ],
)
def test_extract_json_payload(content, expected):
    assert AzureVisionClient._extract_json_payload(content) == expected


def test_fenced_array_falls_through_to_relaxed_prompt(classifier, openai_client):
    openai_client.chat.completions.create.side_effect = [
        _response("```json\n[\"passport\", 90]\n```"),
        _response('{"document_type": "passport", "confidence": 90}'),
    ]

    page = classifier.classify(b"%PDF-single", 0, 1)

    assert page.document_type is DocumentType.PASSPORT
    assert openai_client.chat.completions.create.call_count == 2
