# tests/core/test_cms_models.py
import pytest
from pydantic import ValidationError

from cms_core.core.exceptions import format_validation_errors
from cms_core.model import (
    ContentCreate, FieldType, Template, TemplateCreate, generate_slug, parse_field_values
)


def test_template_accepts_camel_case_documents():
    template = Template.model_validate({
        "name": "Landing",
        "htmlStructure": "<main></main>",
        "cssStyles": "main { margin: 0; }",
        "accessibilityFeatures": {"skipLinks": False},
        "contentFields": [{"id": "hero", "name": "Hero", "type": "rich-text",
                           "validation": {"headingStructure": True}}],
    })

    assert template.html_structure == "<main></main>"
    assert template.accessibility_features.skip_links is False
    assert template.accessibility_features.alt_text_required is True
    assert template.content_fields[0].type == FieldType.RICH_TEXT
    assert template.content_fields[0].validation.heading_structure is True
    assert template.is_active


def test_template_serializes_to_camel_case():
    template = Template(name="Landing", html_structure="<main></main>")
    data = template.model_dump(by_alias=True)
    assert "htmlStructure" in data
    assert "skipLinks" in data["accessibilityFeatures"]


@pytest.mark.parametrize("payload", [
    {"name": "", "htmlStructure": "<main></main>"},
    {"name": "x" * 256, "htmlStructure": "<main></main>"},
    {"name": "Landing", "htmlStructure": ""},
    {"name": "Landing", "htmlStructure": "<main></main>", "contentFields": [{"id": "a", "name": "A", "type": "video"}]},
])
def test_template_create_rejects_malformed_records(payload):
    with pytest.raises(ValidationError):
        TemplateCreate.model_validate(payload)


def test_validation_errors_are_flattened():
    with pytest.raises(ValidationError) as exc_info:
        ContentCreate.model_validate({"title": "Hello"})

    messages = format_validation_errors(exc_info.value)
    assert any(m.startswith("body:") for m in messages)
    assert any(m.startswith(("templateId:", "template_id:")) for m in messages)


@pytest.mark.parametrize("title, slug", [
    ("Hello World", "hello-world"),
    ("  Café & Bar -- Menu!  ", "caf-bar-menu"),
    ("2024 Annual   Report", "2024-annual-report"),
    ("!!!", ""),
])
def test_generate_slug(title, slug):
    assert generate_slug(title) == slug


@pytest.mark.parametrize("body, expected", [
    ('{"title": "Hi", "tags": ["a"]}', {"title": "Hi", "tags": ["a"]}),
    ("Plain text body", {"content": "Plain text body"}),
    ('["not", "an", "object"]', {"content": '["not", "an", "object"]'}),
    ("", {"content": ""}),
])
def test_parse_field_values(body, expected):
    assert parse_field_values(body) == expected
