# src/cms_core/core/services/template_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from cms_core.core.exceptions import (
    TemplateInactiveError, TemplateNotFoundError, TemplateValidationError, format_validation_errors
)
from cms_core.core.managers.template_data_manager import TemplateDataManager
from cms_core.core.services.template_validation_service import (
    TemplateValidationResult, TemplateValidationService
)
from cms_core.model import Content, Template, TemplateCreate, TemplateUpdate
from renderer.controllers.render_controller import TemplateRenderer
from renderer.model import RenderResult
from renderer.services.field_data_service import FieldDataResult, FieldDataService
from wcag_auditor.model import AccessibilityIssue, WcagViolation

logger = logging.getLogger(__name__)


class TemplateWriteResult(BaseModel):
    """A stored template plus the advisory diagnostics of its save gate."""
    template: Template
    warnings: List[str] = Field(default_factory=list)
    violations: List[WcagViolation] = Field(default_factory=list)


class TemplateService:
    """
    Orchestrates template writes (schema check, then the accessibility gate,
    then persistence), activation state, and rendering.
    """

    def __init__(
            self,
            store: TemplateDataManager,
            validation_service: Optional[TemplateValidationService] = None,
            renderer: Optional[TemplateRenderer] = None,
    ):
        self.store = store
        self.validation_service = validation_service or TemplateValidationService()
        self.renderer = renderer or TemplateRenderer()

    # --- Writes ---

    def create_template(self, data: Union[Dict[str, Any], TemplateCreate]) -> TemplateWriteResult:
        """
        Validates and stores a new template.

        Raises:
            TemplateValidationError: The record is malformed or its markup fails
                the accessibility gate. Nothing is stored in that case.
        """
        try:
            payload = data if isinstance(data, TemplateCreate) else TemplateCreate.model_validate(data)
            template = Template.model_validate(payload.model_dump())
        except ValidationError as e:
            raise TemplateValidationError("Template validation failed", format_validation_errors(e)) from e

        result = self._gate(template)
        stored = self.store.create(template)
        logger.info("Template created: %s (%s)", stored.name, stored.id)
        return TemplateWriteResult(template=stored, warnings=result.warnings, violations=result.wcag_violations)

    def update_template(self, template_id: str, data: Union[Dict[str, Any], TemplateUpdate]) -> TemplateWriteResult:
        existing = self._require(template_id)

        try:
            update = data if isinstance(data, TemplateUpdate) else TemplateUpdate.model_validate(data)
            merged = Template.model_validate({
                **existing.model_dump(),
                **update.model_dump(exclude_unset=True, exclude_none=True),
                "updated_at": datetime.now(timezone.utc),
            })
        except ValidationError as e:
            raise TemplateValidationError("Template update validation failed", format_validation_errors(e)) from e

        result = self._gate(merged)
        stored = self.store.update(template_id, merged)
        if stored is None:
            raise TemplateNotFoundError(template_id)
        logger.info("Template updated: %s (%s)", stored.name, stored.id)
        return TemplateWriteResult(template=stored, warnings=result.warnings, violations=result.wcag_violations)

    def _gate(self, template: Template) -> TemplateValidationResult:
        result = self.validation_service.validate_template(template)
        if not result.is_valid:
            raise TemplateValidationError(
                "Template accessibility validation failed", result.errors, result.violations
            )
        if result.warnings:
            logger.debug("Template '%s' passed with %d warning(s)", template.name, len(result.warnings))
        return result

    # --- Reads ---

    def get_all_templates(self) -> List[Template]:
        return self.store.find_all()

    def get_active_templates(self) -> List[Template]:
        return self.store.find_active()

    def get_template_by_id(self, template_id: str) -> Optional[Template]:
        return self.store.find_by_id(template_id)

    def get_template_by_name(self, name: str) -> Optional[Template]:
        return self.store.find_by_name(name)

    def _require(self, template_id: str) -> Template:
        template = self.store.find_by_id(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    # --- State ---

    def activate_template(self, template_id: str) -> Template:
        self._require(template_id)
        logger.info("Template activated: %s", template_id)
        return self.store.activate(template_id)

    def deactivate_template(self, template_id: str) -> Template:
        self._require(template_id)
        logger.info("Template deactivated: %s", template_id)
        return self.store.deactivate(template_id)

    def delete_template(self, template_id: str) -> bool:
        self._require(template_id)
        logger.info("Template deleted: %s", template_id)
        return self.store.delete(template_id)

    # --- Validation & Rendering ---

    def validate_template_compliance(self, template_id: str) -> TemplateValidationResult:
        return self.validation_service.validate_template(self._require(template_id))

    def render_template(
            self,
            template_id: str,
            content: Content,
            field_data: Optional[Dict[str, Any]] = None,
            *,
            audit: bool = False,
    ) -> RenderResult:
        """
        Raises:
            TemplateNotFoundError: Unknown template id.
            TemplateInactiveError: The template exists but is deactivated.
        """
        template = self._require(template_id)
        if not template.is_active:
            raise TemplateInactiveError(template_id)
        return self.renderer.render(template, content, field_data or {}, audit=audit)

    @staticmethod
    def validate_field_data(template: Template, field_data: Dict[str, Any]) -> FieldDataResult:
        return FieldDataService.validate_field_data(template, field_data)

    def create_default_template(self) -> TemplateWriteResult:
        """Stores the built-in basic page template."""
        return self.create_template(DEFAULT_TEMPLATE)


DEFAULT_TEMPLATE: Dict[str, Any] = {
    "name": "Basic Page Template",
    "description": "A basic WCAG 2.2 compliant page template",
    "htmlStructure": """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Basic Page</title>
</head>
<body>
  <header>
    <h1 data-field="page-title">Page Title</h1>
    <nav>
      <ul>
        <li><a href="/">Home</a></li>
        <li><a href="/about">About</a></li>
        <li><a href="/services">Services</a></li>
        <li><a href="/contact">Contact</a></li>
      </ul>
    </nav>
  </header>
  <main id="main-content">
    <article>
      <h2 data-field="content-heading">Content Heading</h2>
      <div data-field="content-body">Content body goes here</div>
      <div data-field="featured-image"></div>
    </article>
  </main>
  <footer>
    <p>&copy; 2024. All rights reserved.</p>
  </footer>
</body>
</html>
""",
    "cssStyles": """body {
  font-family: Arial, sans-serif;
  line-height: 1.6;
  color: #333;
  background-color: #fff;
  margin: 0;
}
header {
  background-color: #2c3e50;
  color: #fff;
  padding: 1rem;
}
nav ul {
  list-style: none;
  display: flex;
  padding: 0;
}
nav a {
  color: #fff;
  padding: 0.5rem;
}
nav a:focus {
  outline: 2px solid #fff;
}
main {
  padding: 2rem;
  max-width: 1200px;
  margin: 0 auto;
}
footer {
  background-color: #34495e;
  color: #fff;
  text-align: center;
  padding: 1rem;
}
""",
    "accessibilityFeatures": {
        "skipLinks": True,
        "headingStructure": True,
        "altTextRequired": True,
        "colorContrastCompliant": True,
    },
    "contentFields": [
        {"id": "page-title", "name": "Page Title", "type": "text", "required": True,
         "validation": {"maxLength": 100}},
        {"id": "content-heading", "name": "Content Heading", "type": "text", "required": True,
         "validation": {"maxLength": 200}},
        {"id": "content-body", "name": "Content Body", "type": "rich-text", "required": True,
         "validation": {"headingStructure": True}},
        {"id": "featured-image", "name": "Featured Image", "type": "image", "required": False,
         "validation": {"altTextRequired": True}},
    ],
    "isActive": True,
}
