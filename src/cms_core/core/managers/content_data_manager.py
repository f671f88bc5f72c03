# src/cms_core/core/managers/content_data_manager.py
import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cms_core.core.managers.database_manager import DatabaseManager
from cms_core.model import Content, ContentVersion

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, title, slug, body, template_id, author_id, status, metadata, "
    "created_at, updated_at, published_at"
)
_VERSION_COLUMNS = "id, content_id, version, title, body, metadata, created_at, created_by"

# Columns an update may touch
_UPDATABLE = {"title", "slug", "body", "template_id", "status", "metadata", "published_at"}


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class ContentDataManager:
    """
    Persistence adapter for content records and their version history.
    Versions are append-only: numbers start at 1 and grow by one per content id.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    # --- Mapping ---

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Content:
        return Content(
            id=row["id"],
            title=row["title"],
            slug=row["slug"],
            body=row["body"],
            template_id=row["template_id"],
            author_id=row["author_id"],
            status=row["status"],
            metadata=json.loads(row["metadata"] or "{}"),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            published_at=row["published_at"],
        )

    @staticmethod
    def _version_from_row(row: sqlite3.Row) -> ContentVersion:
        return ContentVersion(
            id=row["id"],
            content_id=row["content_id"],
            version=row["version"],
            title=row["title"],
            body=row["body"],
            metadata=json.loads(row["metadata"] or "{}"),
            created_at=row["created_at"],
            created_by=row["created_by"],
        )

    # --- Reads ---

    def find_by_id(self, content_id: str) -> Optional[Content]:
        row = self.db.fetch_one(f"SELECT {_COLUMNS} FROM content WHERE id = ?", (content_id,))
        return self._from_row(row) if row else None

    def find_by_slug(self, slug: str) -> Optional[Content]:
        row = self.db.fetch_one(f"SELECT {_COLUMNS} FROM content WHERE slug = ?", (slug,))
        return self._from_row(row) if row else None

    def find_all(self, status: Optional[str] = None, template_id: Optional[str] = None) -> List[Content]:
        clauses, params = [], []
        if status:
            clauses.append("status = ?")
            params.append(status)
        if template_id:
            clauses.append("template_id = ?")
            params.append(template_id)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self.db.fetch_all(f"SELECT {_COLUMNS} FROM content{where} ORDER BY updated_at DESC", tuple(params))
        return [self._from_row(r) for r in rows]

    # --- Writes ---

    def create(self, content: Content) -> Content:
        if not content.id:
            content = content.model_copy(update={"id": str(uuid.uuid4())})
        self.db.execute_query(
            f"INSERT INTO content ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                content.id, content.title, content.slug, content.body, content.template_id,
                content.author_id, content.status.value, json.dumps(content.metadata),
                _iso(content.created_at), _iso(content.updated_at), _iso(content.published_at),
            )
        )
        logger.debug("Content stored: %s (%s)", content.slug, content.id)
        return content

    def update(self, content_id: str, fields: Dict[str, Any]) -> Optional[Content]:
        """
        Updates the given columns and bumps updated_at.
        Returns the refreshed record, or None when the id is unknown.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update content columns: {', '.join(sorted(unknown))}")

        values = dict(fields)
        if "metadata" in values:
            values["metadata"] = json.dumps(values["metadata"] or {})
        if "status" in values and hasattr(values["status"], "value"):
            values["status"] = values["status"].value
        if isinstance(values.get("published_at"), datetime):
            values["published_at"] = _iso(values["published_at"])
        values["updated_at"] = datetime.now(timezone.utc).isoformat()

        assignments = ", ".join(f"{column} = ?" for column in values)
        affected = self.db.execute_query(
            f"UPDATE content SET {assignments} WHERE id = ?",
            tuple(values.values()) + (content_id,)
        )
        return self.find_by_id(content_id) if affected else None

    def delete(self, content_id: str) -> bool:
        return self.db.execute_query("DELETE FROM content WHERE id = ?", (content_id,)) > 0

    # --- Versions ---

    def create_version(self, content: Content, created_by: Optional[str] = None) -> ContentVersion:
        """Appends a snapshot (title, body, metadata) of the given content state."""
        row = self.db.fetch_one(
            "SELECT COALESCE(MAX(version), 0) AS latest FROM content_versions WHERE content_id = ?",
            (content.id,)
        )
        version = ContentVersion(
            content_id=content.id,
            version=(row["latest"] if row else 0) + 1,
            title=content.title,
            body=content.body,
            metadata=content.metadata,
            created_by=created_by,
        )
        row_id = self.db.execute_insert(
            f"INSERT INTO content_versions ({_VERSION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                None, version.content_id, version.version, version.title, version.body,
                json.dumps(version.metadata), _iso(version.created_at), version.created_by,
            )
        )
        logger.debug("Version %d recorded for content %s", version.version, content.id)
        return version.model_copy(update={"id": row_id})

    def get_versions(self, content_id: str) -> List[ContentVersion]:
        """All versions of a content item, newest first."""
        rows = self.db.fetch_all(
            f"SELECT {_VERSION_COLUMNS} FROM content_versions WHERE content_id = ? ORDER BY version DESC",
            (content_id,)
        )
        return [self._version_from_row(r) for r in rows]

    def get_version(self, content_id: str, version: int) -> Optional[ContentVersion]:
        row = self.db.fetch_one(
            f"SELECT {_VERSION_COLUMNS} FROM content_versions WHERE content_id = ? AND version = ?",
            (content_id, version)
        )
        return self._version_from_row(row) if row else None
