# src/cms_core/core/managers/template_data_manager.py
import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from cms_core.core.managers.database_manager import DatabaseManager
from cms_core.model import Template

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, description, html_structure, css_styles, accessibility_features, "
    "content_fields, is_active, created_at, updated_at"
)


class TemplateDataManager:
    """
    Persistence adapter for templates. Validation happens in the
    TemplateService before anything reaches this layer.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    # --- Mapping ---

    @staticmethod
    def _to_row(template: Template) -> tuple:
        data = template.model_dump(mode="json", by_alias=True)
        return (
            template.id,
            template.name,
            template.description,
            template.html_structure,
            template.css_styles,
            json.dumps(data["accessibilityFeatures"]),
            json.dumps(data["contentFields"]),
            int(template.is_active),
            template.created_at.isoformat(),
            template.updated_at.isoformat(),
        )

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Template:
        return Template(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            html_structure=row["html_structure"],
            css_styles=row["css_styles"],
            accessibility_features=json.loads(row["accessibility_features"]),
            content_fields=json.loads(row["content_fields"]),
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    # --- Reads ---

    def find_by_id(self, template_id: str) -> Optional[Template]:
        row = self.db.fetch_one(f"SELECT {_COLUMNS} FROM templates WHERE id = ?", (template_id,))
        return self._from_row(row) if row else None

    def find_by_name(self, name: str) -> Optional[Template]:
        row = self.db.fetch_one(f"SELECT {_COLUMNS} FROM templates WHERE name = ?", (name,))
        return self._from_row(row) if row else None

    def find_all(self) -> List[Template]:
        rows = self.db.fetch_all(f"SELECT {_COLUMNS} FROM templates ORDER BY name")
        return [self._from_row(r) for r in rows]

    def find_active(self) -> List[Template]:
        rows = self.db.fetch_all(f"SELECT {_COLUMNS} FROM templates WHERE is_active = 1 ORDER BY name")
        return [self._from_row(r) for r in rows]

    # --- Writes ---

    def create(self, template: Template) -> Template:
        """Inserts a template. An id is generated when the template has none."""
        if not template.id:
            template = template.model_copy(update={"id": str(uuid.uuid4())})
        self.db.execute_query(
            f"INSERT INTO templates ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            self._to_row(template)
        )
        logger.debug("Template stored: %s (%s)", template.name, template.id)
        return template

    def update(self, template_id: str, template: Template) -> Optional[Template]:
        template = template.model_copy(update={"id": template_id})
        row = self._to_row(template)
        affected = self.db.execute_query(
            """
            UPDATE templates SET name = ?, description = ?, html_structure = ?, css_styles = ?,
                accessibility_features = ?, content_fields = ?, is_active = ?, updated_at = ?
            WHERE id = ?
            """,
            row[1:8] + (row[9], template_id)
        )
        return self.find_by_id(template_id) if affected else None

    def _set_active(self, template_id: str, active: bool) -> Optional[Template]:
        affected = self.db.execute_query(
            "UPDATE templates SET is_active = ?, updated_at = ? WHERE id = ?",
            (int(active), datetime.now(timezone.utc).isoformat(), template_id)
        )
        return self.find_by_id(template_id) if affected else None

    def activate(self, template_id: str) -> Optional[Template]:
        return self._set_active(template_id, True)

    def deactivate(self, template_id: str) -> Optional[Template]:
        return self._set_active(template_id, False)

    def delete(self, template_id: str) -> bool:
        return self.db.execute_query("DELETE FROM templates WHERE id = ?", (template_id,)) > 0
