# src/cms_core/core/services/content_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from cms_core.core.exceptions import (
    ContentNotFoundError, ContentStateError, ContentValidationError, SlugConflictError,
    TemplateInactiveError, TemplateNotFoundError, VersionNotFoundError, format_validation_errors
)
from cms_core.core.managers.content_data_manager import ContentDataManager
from cms_core.core.services.template_service import TemplateService
from cms_core.model import (
    Content, ContentCreate, ContentStatus, ContentUpdate, ContentVersion,
    generate_slug, parse_field_values
)
from renderer.model import RenderResult

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ContentService:
    """
    Content lifecycle: draft -> published -> draft/archived, with an
    append-only version history. A snapshot of published content is always
    recorded before it is changed.
    """

    def __init__(self, store: ContentDataManager, template_service: TemplateService):
        self.store = store
        self.template_service = template_service

    # --- Helpers ---

    def _require(self, content_id: str) -> Content:
        content = self.store.find_by_id(content_id)
        if content is None:
            raise ContentNotFoundError(f"Content not found: {content_id}")
        return content

    def _require_active_template(self, template_id: str) -> None:
        template = self.template_service.get_template_by_id(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        if not template.is_active:
            raise TemplateInactiveError(template_id)

    def _check_slug(self, slug: str, own_id: Optional[str] = None) -> None:
        if not slug:
            raise ContentValidationError("Invalid title", ["title: must contain at least one letter or digit"])
        existing = self.store.find_by_slug(slug)
        if existing is not None and existing.id != own_id:
            raise SlugConflictError(slug)

    def _snapshot_if_published(self, content: Content, user_id: Optional[str]) -> Optional[ContentVersion]:
        if content.status == ContentStatus.PUBLISHED:
            return self.store.create_version(content, user_id)
        return None

    # --- Reads ---

    def get_content(self, content_id: str) -> Content:
        return self._require(content_id)

    def list_content(self, status: Optional[str] = None, template_id: Optional[str] = None) -> List[Content]:
        return self.store.find_all(status=status, template_id=template_id)

    def get_content_by_slug(self, slug: str) -> Content:
        """Public lookup: only published content is visible."""
        content = self.store.find_by_slug(slug)
        if content is None or content.status != ContentStatus.PUBLISHED:
            raise ContentNotFoundError(f"Content not found: {slug}")
        return content

    @staticmethod
    def get_field_values(content: Content) -> Dict[str, Any]:
        return parse_field_values(content.body)

    # --- Writes ---

    def create_content(self, data: Union[Dict[str, Any], ContentCreate], author_id: Optional[str] = None) -> Content:
        try:
            payload = data if isinstance(data, ContentCreate) else ContentCreate.model_validate(data)
        except ValidationError as e:
            raise ContentValidationError("Title, body, and template ID are required",
                                         format_validation_errors(e)) from e

        self._require_active_template(payload.template_id)

        slug = generate_slug(payload.title)
        self._check_slug(slug)

        now = _now()
        content = Content(
            title=payload.title,
            slug=slug,
            body=payload.body,
            template_id=payload.template_id,
            author_id=author_id,
            status=payload.status,
            metadata=payload.metadata,
            created_at=now,
            updated_at=now,
            published_at=now if payload.status == ContentStatus.PUBLISHED else None,
        )
        created = self.store.create(content)
        logger.info("Content created: %s (%s)", created.slug, created.id)
        return created

    def update_content(self, content_id: str, data: Union[Dict[str, Any], ContentUpdate],
                       user_id: Optional[str] = None) -> Content:
        existing = self._require(content_id)
        try:
            update = data if isinstance(data, ContentUpdate) else ContentUpdate.model_validate(data)
        except ValidationError as e:
            raise ContentValidationError("Content update validation failed", format_validation_errors(e)) from e

        if update.template_id is not None:
            self._require_active_template(update.template_id)

        fields: Dict[str, Any] = {}
        if update.title is not None:
            fields["title"] = update.title
            if update.title != existing.title:
                slug = generate_slug(update.title)
                self._check_slug(slug, own_id=content_id)
                fields["slug"] = slug
        if update.body is not None:
            fields["body"] = update.body
        if update.template_id is not None:
            fields["template_id"] = update.template_id
        if update.metadata is not None:
            fields["metadata"] = update.metadata
        if update.status is not None:
            fields.update(self._status_fields(existing, update.status))

        # Snapshot only once the update is known to be valid
        self._snapshot_if_published(existing, user_id)
        updated = self.store.update(content_id, fields)
        logger.info("Content updated: %s", content_id)
        return updated

    @staticmethod
    def _status_fields(existing: Content, status: ContentStatus) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"status": status}
        if status == ContentStatus.PUBLISHED and existing.status != ContentStatus.PUBLISHED:
            fields["published_at"] = _now()
        elif status != ContentStatus.PUBLISHED and existing.status == ContentStatus.PUBLISHED:
            fields["published_at"] = None
        return fields

    def delete_content(self, content_id: str) -> bool:
        self._require(content_id)
        logger.info("Content deleted: %s", content_id)
        return self.store.delete(content_id)

    # --- Lifecycle ---

    def publish_content(self, content_id: str, user_id: Optional[str] = None) -> Content:
        """Publishing always records a snapshot of the state being published over."""
        existing = self._require(content_id)
        self.store.create_version(existing, user_id)

        fields: Dict[str, Any] = {"status": ContentStatus.PUBLISHED}
        if existing.status != ContentStatus.PUBLISHED:
            fields["published_at"] = _now()
        published = self.store.update(content_id, fields)
        logger.info("Content published: %s", content_id)
        return published

    def unpublish_content(self, content_id: str, user_id: Optional[str] = None) -> Content:
        existing = self._require(content_id)
        if existing.status != ContentStatus.PUBLISHED:
            raise ContentStateError(f"Content is not published: {content_id}")

        self.store.create_version(existing, user_id)
        unpublished = self.store.update(content_id, {"status": ContentStatus.DRAFT, "published_at": None})
        logger.info("Content unpublished: %s", content_id)
        return unpublished

    def archive_content(self, content_id: str, user_id: Optional[str] = None) -> Content:
        existing = self._require(content_id)
        if existing.status == ContentStatus.ARCHIVED:
            raise ContentStateError(f"Content is already archived: {content_id}")

        self._snapshot_if_published(existing, user_id)
        archived = self.store.update(content_id, self._status_fields(existing, ContentStatus.ARCHIVED))
        logger.info("Content archived: %s", content_id)
        return archived

    # --- Versions ---

    def get_versions(self, content_id: str) -> List[ContentVersion]:
        self._require(content_id)
        return self.store.get_versions(content_id)

    def restore_version(self, content_id: str, version: int, user_id: Optional[str] = None) -> Content:
        """
        Restores title, body and metadata of a recorded version. The current
        state of published content is snapshotted first, so nothing is lost.
        """
        existing = self._require(content_id)
        snapshot = self.store.get_version(content_id, version)
        if snapshot is None:
            raise VersionNotFoundError(content_id, version)

        fields: Dict[str, Any] = {"title": snapshot.title, "body": snapshot.body, "metadata": snapshot.metadata}
        if snapshot.title != existing.title:
            slug = generate_slug(snapshot.title)
            self._check_slug(slug, own_id=content_id)
            fields["slug"] = slug

        self._snapshot_if_published(existing, user_id)
        restored = self.store.update(content_id, fields)
        logger.info("Content %s restored to version %d", content_id, version)
        return restored

    # --- Rendering ---

    def render_content(self, content_id: str, audit: bool = False) -> RenderResult:
        content = self._require(content_id)
        return self.template_service.render_template(
            content.template_id, content, self.get_field_values(content), audit=audit
        )
