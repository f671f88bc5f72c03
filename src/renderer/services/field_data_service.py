from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, Field

from cms_core.model import FieldDescriptor, FieldType, Template

logger = logging.getLogger(__name__)

STRING_TYPES = (FieldType.TEXT, FieldType.TEXTAREA, FieldType.RICH_TEXT)


class FieldDataResult(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


def is_empty(value: Any) -> bool:
    """A field value counts as missing when it is absent, None or the empty string."""
    return value is None or value == ""


def _has(value: Any, key: str) -> bool:
    return isinstance(value, dict) and not is_empty(value.get(key))


class FieldDataService:
    """
    Stateless checks of field values against a template's field descriptors.

    `check_render_data` is the gate in front of a render (errors abort it,
    warnings do not). `validate_field_data` is the standalone variant that
    also applies the custom rules (minLength, maxLength, pattern, allowedValues).
    Both collect every problem instead of stopping at the first one.
    """

    # -------- Render Gate --------

    @staticmethod
    def check_render_data(template: Template, data: Dict[str, Any]) -> Tuple[List[str], List[str]]:
        errors: List[str] = []
        warnings: List[str] = []

        for field in template.content_fields:
            value = data.get(field.id)

            if field.required and is_empty(value):
                errors.append(f'Required field "{field.name}" ({field.id}) is missing or empty')
            if is_empty(value):
                continue

            if field.type in STRING_TYPES:
                if not isinstance(value, str):
                    errors.append(f'Field "{field.name}" must be a string')
            elif field.type == FieldType.IMAGE:
                errors.extend(FieldDataService._image_shape_errors(field, value))
            elif field.type == FieldType.LINK:
                errors.extend(FieldDataService._link_shape_errors(field, value))
                if field.validation.title_required and not _has(value, "title"):
                    warnings.append(f'Link field "{field.name}" should have a title for accessibility')

        return errors, warnings

    # -------- Standalone Validation --------

    @staticmethod
    def validate_field_data(template: Template, data: Dict[str, Any]) -> FieldDataResult:
        errors: List[str] = []

        for field in template.content_fields:
            value = data.get(field.id)

            if field.required and is_empty(value):
                errors.append(f'Field "{field.name}" is required')
                continue
            if is_empty(value):
                continue

            if field.type in STRING_TYPES:
                if not isinstance(value, str):
                    errors.append(f'Field "{field.name}" must be a string')
            elif field.type == FieldType.IMAGE:
                errors.extend(FieldDataService._image_shape_errors(field, value))
            elif field.type == FieldType.LINK:
                errors.extend(FieldDataService._link_shape_errors(field, value))

            errors.extend(FieldDataService._custom_rule_errors(field, value))

        return FieldDataResult(is_valid=not errors, errors=errors)

    # -------- Helpers --------

    @staticmethod
    def _image_shape_errors(field: FieldDescriptor, value: Any) -> List[str]:
        errors = []
        if not _has(value, "src"):
            errors.append(f'Image field "{field.name}" must have a src property')
        if field.validation.alt_text_required and not _has(value, "alt"):
            errors.append(f'Image field "{field.name}" requires alt text')
        return errors

    @staticmethod
    def _link_shape_errors(field: FieldDescriptor, value: Any) -> List[str]:
        if not _has(value, "href"):
            return [f'Link field "{field.name}" must have an href property']
        return []

    @staticmethod
    def _custom_rule_errors(field: FieldDescriptor, value: Any) -> List[str]:
        rules = field.validation
        errors = []

        if isinstance(value, str):
            if rules.min_length and len(value) < rules.min_length:
                errors.append(f'Field "{field.name}" must be at least {rules.min_length} characters long')
            if rules.max_length and len(value) > rules.max_length:
                errors.append(f'Field "{field.name}" must be no more than {rules.max_length} characters long')
            if rules.pattern:
                try:
                    matched = re.search(rules.pattern, value) is not None
                except re.error as e:
                    logger.warning("Invalid pattern on field %s: %s", field.id, e)
                    errors.append(f'Field "{field.name}" has an invalid validation pattern')
                else:
                    if not matched:
                        errors.append(f'Field "{field.name}" does not match the required pattern')

        if rules.allowed_values is not None and value not in rules.allowed_values:
            allowed = ", ".join(str(v) for v in rules.allowed_values)
            errors.append(f'Field "{field.name}" must be one of: {allowed}')

        return errors
