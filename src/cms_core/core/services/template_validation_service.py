# src/cms_core/core/services/template_validation_service.py
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from cms_core.model import FieldDescriptor, FieldType, Template
from wcag_auditor.controllers.audit_controller import AccessibilityValidator
from wcag_auditor.model import (
    AccessibilityIssue, AccessibilityReport, IssueLevel, WcagLevel, WcagViolation
)

logger = logging.getLogger(__name__)

LOW_CONTRAST_CSS = [
    re.compile(r"#fff.*#f0f0f0", re.IGNORECASE),
    re.compile(r"#000.*#333", re.IGNORECASE),
    re.compile(r"rgb\(255,\s*255,\s*255\).*rgb\(240,\s*240,\s*240\)", re.IGNORECASE),
]
SKIP_LINK_PHRASES = ("skip to main", "skip to content")
INTERACTIVE_TAGS = ["button", "a", "input", "textarea", "select"]


class TemplateValidationResult(BaseModel):
    """
    Outcome of the template save gate. Only `errors` block a save;
    `warnings` and `wcag_violations` are advisory.
    """
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    violations: List[AccessibilityIssue] = Field(default_factory=list)
    wcag_violations: List[WcagViolation] = Field(default_factory=list)
    report: Optional[AccessibilityReport] = None


def _duplicates(values: List[str]) -> List[str]:
    """Every repeated occurrence after the first, in order."""
    seen, repeated = set(), []
    for value in values:
        if value in seen:
            repeated.append(value)
        seen.add(value)
    return repeated


class TemplateValidationService:
    """Runs every check a template must pass before it may be stored."""

    def __init__(self, validator: Optional[AccessibilityValidator] = None):
        self.validator = validator or AccessibilityValidator()

    def validate_template(self, template: Template) -> TemplateValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        # 1. Structural validator over the skeleton
        report = self.validator.validate(template.html_structure)
        blocking = report.by_level(IssueLevel.ERROR)
        errors.extend(f"{issue.rule}: {issue.message}" for issue in blocking)
        warnings.extend(f"{issue.rule}: {issue.message}" for issue in report.by_level(IssueLevel.WARNING))

        # 2. Field definitions
        field_errors, field_warnings = self.validate_fields(template.content_fields)
        errors.extend(field_errors)
        warnings.extend(field_warnings)

        # 3. Template-level advisories
        wcag_violations = self.check_template_wcag(template)
        warnings.extend(str(v) for v in wcag_violations)

        logger.debug(
            "Template '%s' validated: %d error(s), %d warning(s)",
            template.name, len(errors), len(warnings)
        )
        return TemplateValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            violations=blocking,
            wcag_violations=wcag_violations,
            report=report,
        )

    # -------- Field Definitions --------

    @staticmethod
    def validate_fields(fields: List[FieldDescriptor]):
        errors: List[str] = []
        warnings: List[str] = []

        duplicate_ids = _duplicates([f.id for f in fields])
        if duplicate_ids:
            errors.append(f"Duplicate field IDs found: {', '.join(duplicate_ids)}")

        duplicate_names = _duplicates([f.name for f in fields])
        if duplicate_names:
            errors.append(f"Duplicate field names found: {', '.join(duplicate_names)}")

        for index, field in enumerate(fields):
            if not field.id.strip():
                errors.append(f"Field at index {index} must have a valid ID")
            if not field.name.strip():
                errors.append(f"Field at index {index} must have a valid name")

            rules = field.validation
            if field.type == FieldType.IMAGE and not rules.alt_text_required:
                warnings.append(f'Image field "{field.name}" should require alt text for accessibility')
            elif field.type == FieldType.LINK and not rules.title_required:
                warnings.append(f'Link field "{field.name}" should require title attribute for accessibility')
            elif field.type == FieldType.RICH_TEXT and not rules.heading_structure:
                warnings.append(f'Rich text field "{field.name}" should validate heading structure')

        return errors, warnings

    # -------- Template-level WCAG Advisories --------

    @staticmethod
    def check_template_wcag(template: Template) -> List[WcagViolation]:
        violations: List[WcagViolation] = []
        soup = BeautifulSoup(template.html_structure, "html.parser")
        features = template.accessibility_features

        if features.skip_links:
            has_skip_to_main = any(
                any(phrase in a.get_text().lower() for phrase in SKIP_LINK_PHRASES)
                for a in soup.find_all("a", href=re.compile(r"^#"))
            )
            if not has_skip_to_main:
                violations.append(WcagViolation(
                    rule="WCAG 2.4.1", level=WcagLevel.A,
                    description="Template should include skip links for keyboard navigation"
                ))

        if features.color_contrast_compliant:
            for pattern in LOW_CONTRAST_CSS:
                if pattern.search(template.css_styles or ""):
                    violations.append(WcagViolation(
                        rule="WCAG 1.4.3", level=WcagLevel.AA,
                        description="Color contrast may not meet WCAG AA standards (4.5:1 ratio)"
                    ))

        for lst in soup.find_all(["ul", "ol"]):
            if any(child.name != "li" for child in lst.find_all(recursive=False)):
                violations.append(WcagViolation(
                    rule="WCAG 1.3.1", level=WcagLevel.A,
                    description="Lists should only contain li elements as direct children",
                    element=lst.name
                ))

        for element in soup.find_all(INTERACTIVE_TAGS):
            try:
                tabindex = int(str(element.get("tabindex", "")).strip())
            except ValueError:
                continue
            if tabindex < -1:
                violations.append(WcagViolation(
                    rule="WCAG 2.1.1", level=WcagLevel.A,
                    description="Interactive elements should not have negative tabindex values (except -1)",
                    element=element.name
                ))

        return violations
