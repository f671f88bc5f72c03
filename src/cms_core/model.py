# src/cms_core/model.py (Content & Template Layer)
import json
import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Accepts both camelCase (stored JSON documents) and snake_case keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- TEMPLATES ---

class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    RICH_TEXT = "rich-text"
    IMAGE = "image"
    LINK = "link"


class FieldValidation(CamelModel):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    allowed_values: Optional[List[Any]] = None
    alt_text_required: bool = False
    title_required: bool = False
    heading_structure: bool = False


class FieldDescriptor(CamelModel):
    id: str
    name: str
    type: FieldType
    required: bool = False
    validation: FieldValidation = Field(default_factory=FieldValidation)


class AccessibilityFeatures(CamelModel):
    skip_links: bool = True
    heading_structure: bool = True
    alt_text_required: bool = True
    color_contrast_compliant: bool = True


class TemplateCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    html_structure: str = Field(min_length=1)
    css_styles: str = ""
    accessibility_features: AccessibilityFeatures = Field(default_factory=AccessibilityFeatures)
    content_fields: List[FieldDescriptor] = Field(default_factory=list)
    is_active: bool = True


class Template(TemplateCreate):
    id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class TemplateUpdate(CamelModel):
    """Partial update; only explicitly set fields are merged."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    html_structure: Optional[str] = Field(default=None, min_length=1)
    css_styles: Optional[str] = None
    accessibility_features: Optional[AccessibilityFeatures] = None
    content_fields: Optional[List[FieldDescriptor]] = None
    is_active: Optional[bool] = None


# --- CONTENT ---

class ContentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Content(CamelModel):
    id: Optional[str] = None
    title: str
    slug: str = ""
    body: str = ""
    template_id: Optional[str] = None
    author_id: Optional[str] = None
    status: ContentStatus = ContentStatus.DRAFT
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    published_at: Optional[datetime] = None


class ContentCreate(CamelModel):
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
    template_id: str = Field(min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    status: ContentStatus = ContentStatus.DRAFT


class ContentUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    body: Optional[str] = None
    template_id: Optional[str] = Field(default=None, min_length=1)
    metadata: Optional[Dict[str, Any]] = None
    status: Optional[ContentStatus] = None


class ContentVersion(CamelModel):
    id: Optional[int] = None
    content_id: str
    version: int
    title: str
    body: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)
    created_by: Optional[str] = None


# --- HELPERS ---

def parse_field_values(body: Optional[str]) -> Dict[str, Any]:
    """
    Field values are stored as a JSON object in the content body.
    Anything else is treated as the value of a single implicit 'content' field.
    """
    try:
        parsed = json.loads(body) if body else None
    except (TypeError, ValueError):
        parsed = None

    if isinstance(parsed, dict):
        return parsed

    logger.debug("Content body is not a JSON object; using it as the 'content' field")
    return {"content": body}


def generate_slug(title: str) -> str:
    """URL-friendly slug: lowercase ascii words joined by single hyphens."""
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
