from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from cms_core.core.managers.config_manager import config_manager
from cms_core.model import Content, Template
from renderer.model import RenderResult
from renderer.services.document_service import DocumentService
from renderer.services.field_bind_service import FieldBinder
from renderer.services.field_data_service import FieldDataService
from renderer.services import repair_service
from wcag_auditor.controllers.audit_controller import AccessibilityValidator

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Binds content field values into a template skeleton, applies the
    accessibility repair passes and serializes the page.

    Every render parses a fresh tree; no state is shared between calls.
    """

    def __init__(self, *, skip_link_text: Optional[str] = None, main_content_id: Optional[str] = None) -> None:
        self.skip_link_text = skip_link_text or config_manager.get_nested(
            "renderer.skip_link_text", "Skip to main content")
        self.main_content_id = main_content_id or config_manager.get_nested(
            "renderer.main_content_id", "main-content")

    def render(
            self,
            template: Template,
            content: Content,
            data: Optional[Dict[str, Any]] = None,
            *,
            audit: bool = False,
    ) -> RenderResult:
        """
        Renders `content` with `template`. Errors never raise: they come back
        in the result with empty html. With `audit=True` the finished page is
        also run through the AccessibilityValidator.
        """
        data = data or {}
        errors, warnings = FieldDataService.check_render_data(template, data)
        if errors:
            logger.debug("Render of '%s' rejected: %d field error(s)", template.name, len(errors))
            return RenderResult(html="", errors=errors, warnings=warnings)

        try:
            soup = DocumentService.parse(template.html_structure)
            DocumentService.inject_styles(soup, template.css_styles)

            binder = FieldBinder(soup)
            for field in template.content_fields:
                binder.bind(field, data.get(field.id))

            self._apply_accessibility_enhancements(soup, template)
            DocumentService.set_page_metadata(soup, content)

            html = DocumentService.serialize(soup)
        except Exception as e:
            logger.error("Template rendering failed for '%s': %s", template.name, e, exc_info=True)
            return RenderResult(html="", errors=[f"Template rendering failed: {e}"], warnings=warnings)

        report = AccessibilityValidator().validate(soup) if audit else None
        return RenderResult(html=html, errors=[], warnings=warnings, report=report)

    def _apply_accessibility_enhancements(self, soup, template: Template) -> None:
        features = template.accessibility_features

        if features.skip_links:
            repair_service.add_skip_links(soup, self.skip_link_text, self.main_content_id)
        if features.heading_structure:
            repair_service.normalize_headings(soup)
        if features.alt_text_required:
            repair_service.ensure_image_alt_text(soup)

        # Landmark roles are not tied to a feature flag
        repair_service.add_aria_landmarks(soup)


def render_template(
        template: Template,
        content: Content,
        data: Optional[Dict[str, Any]] = None,
        *,
        audit: bool = False,
) -> RenderResult:
    """Quick render with a renderer configured from settings."""
    return TemplateRenderer().render(template, content, data, audit=audit)
