# tests/renderer/test_field_data_service.py
import pytest

from cms_core.model import Template
from renderer.services.field_data_service import FieldDataService, is_empty


def template_with(*fields) -> Template:
    return Template.model_validate({
        "name": "Fields",
        "htmlStructure": "<main></main>",
        "contentFields": list(fields),
    })


@pytest.mark.parametrize("value, expected", [
    (None, True),
    ("", True),
    (0, False),
    (False, False),
    ("   ", False),
    ({}, False),
])
def test_is_empty(value, expected):
    assert is_empty(value) is expected


# --- Standalone validation ---

def test_required_field_short_circuits_further_checks():
    template = template_with({"id": "title", "name": "Title", "type": "text", "required": True,
                              "validation": {"minLength": 5}})
    result = FieldDataService.validate_field_data(template, {"title": ""})

    assert not result.is_valid
    assert result.errors == ['Field "Title" is required']


def test_valid_data():
    template = template_with(
        {"id": "title", "name": "Title", "type": "text", "required": True},
        {"id": "photo", "name": "Photo", "type": "image", "validation": {"altTextRequired": True}},
        {"id": "cta", "name": "CTA", "type": "link"},
    )
    data = {"title": "Hello", "photo": {"src": "a.png", "alt": "A"}, "cta": {"href": "/x"}}

    result = FieldDataService.validate_field_data(template, data)
    assert result.is_valid
    assert result.errors == []


def test_length_rules():
    template = template_with(
        {"id": "short", "name": "Short", "type": "text", "validation": {"minLength": 3}},
        {"id": "long", "name": "Long", "type": "text", "validation": {"maxLength": 4}},
    )
    result = FieldDataService.validate_field_data(template, {"short": "ab", "long": "abcdef"})

    assert result.errors == [
        'Field "Short" must be at least 3 characters long',
        'Field "Long" must be no more than 4 characters long',
    ]


def test_pattern_rule():
    template = template_with({"id": "code", "name": "Postcode", "type": "text",
                              "validation": {"pattern": r"^\d{4}[A-Z]{2}$"}})

    assert FieldDataService.validate_field_data(template, {"code": "1234AB"}).is_valid
    result = FieldDataService.validate_field_data(template, {"code": "12AB"})
    assert result.errors == ['Field "Postcode" does not match the required pattern']


def test_invalid_pattern_is_reported_not_raised():
    template = template_with({"id": "code", "name": "Code", "type": "text",
                              "validation": {"pattern": "([unclosed"}})
    result = FieldDataService.validate_field_data(template, {"code": "x"})
    assert result.errors == ['Field "Code" has an invalid validation pattern']


def test_allowed_values():
    template = template_with({"id": "tone", "name": "Tone", "type": "text",
                              "validation": {"allowedValues": ["formal", "casual"]}})
    result = FieldDataService.validate_field_data(template, {"tone": "rude"})
    assert result.errors == ['Field "Tone" must be one of: formal, casual']


def test_shape_errors():
    template = template_with(
        {"id": "photo", "name": "Photo", "type": "image", "validation": {"altTextRequired": True}},
        {"id": "cta", "name": "CTA", "type": "link"},
        {"id": "body", "name": "Body", "type": "rich-text"},
    )
    result = FieldDataService.validate_field_data(template, {"photo": {"alt": ""}, "cta": {"text": "Go"}, "body": 3})

    assert result.errors == [
        'Image field "Photo" must have a src property',
        'Image field "Photo" requires alt text',
        'Link field "CTA" must have an href property',
        'Field "Body" must be a string',
    ]


def test_unknown_keys_are_ignored():
    template = template_with({"id": "title", "name": "Title", "type": "text"})
    assert FieldDataService.validate_field_data(template, {"other": 1}).is_valid


# --- Render gate ---

def test_render_gate_keeps_checking_after_missing_required():
    template = template_with(
        {"id": "a", "name": "A", "type": "text", "required": True},
        {"id": "b", "name": "B", "type": "text", "required": True},
    )
    errors, warnings = FieldDataService.check_render_data(template, {"a": None})

    assert errors == [
        'Required field "A" (a) is missing or empty',
        'Required field "B" (b) is missing or empty',
    ]
    assert warnings == []


def test_render_gate_ignores_custom_rules():
    template = template_with({"id": "a", "name": "A", "type": "text", "validation": {"maxLength": 1}})
    errors, _ = FieldDataService.check_render_data(template, {"a": "too long"})
    assert errors == []


def test_render_gate_link_title_warning():
    template = template_with({"id": "cta", "name": "CTA", "type": "link", "validation": {"titleRequired": True}})

    errors, warnings = FieldDataService.check_render_data(template, {"cta": {"href": "/x"}})
    assert errors == []
    assert warnings == ['Link field "CTA" should have a title for accessibility']

    _, warnings = FieldDataService.check_render_data(template, {"cta": {"href": "/x", "title": "Go"}})
    assert warnings == []
