# ============================================
# file: src/renderer/model.py
# ============================================
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from wcag_auditor.model import AccessibilityReport


class RenderResult(BaseModel):
    """
    Outcome of a render. Rendering is all-or-nothing: any error means html is ''.
    `report` is only filled when a post-render audit was requested.
    """
    html: str = ""
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    report: Optional[AccessibilityReport] = None

    @property
    def ok(self) -> bool:
        return not self.errors


class ImageValue(BaseModel):
    src: str
    alt: Optional[str] = None
    title: Optional[str] = None


class LinkValue(BaseModel):
    href: str
    text: Optional[str] = None
    title: Optional[str] = None
    target: Optional[str] = None
