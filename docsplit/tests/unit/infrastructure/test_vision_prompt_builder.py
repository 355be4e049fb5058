from docsplit.infrastructure.vision.vision_prompt_builder import (
    DEFAULT_PROMPT_TEMPLATE,
    build_prompt_attempts,
)


def test_build_prompt_attempts_structure():
    attempts = build_prompt_attempts(4, 46, "data:image/png;base64,AAA")

    assert len(attempts) == 2
    assert attempts[0].force_json is True
    assert attempts[1].force_json is False

    system_message = attempts[0].messages[0]
    assert system_message["role"] == "system"
    assert system_message["content"] == DEFAULT_PROMPT_TEMPLATE

    user_content = attempts[0].messages[1]["content"]
    assert "Page 5 of 46" in user_content[0]["text"]
    assert user_content[1]["image_url"]["url"] == "data:image/png;base64,AAA"


def test_prompt_lists_every_document_type():
    for label in ("tax_certificate", "incorporation_deed", "bank_statement", "unknown"):
        assert label in DEFAULT_PROMPT_TEMPLATE
    assert "extracted_tax_id" in DEFAULT_PROMPT_TEMPLATE
