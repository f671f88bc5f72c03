# src/wcag_auditor/dom/models.py
from typing import Optional, Set
from pydantic import BaseModel, Field
from .core import ElementBase


class HTMLDocument(BaseModel):
    """
    Represents a parsed HTML document.

    This model serves as the root container for the simplified element tree
    together with the document-level facts the rule engine needs
    (language declaration, page title, known element ids).
    """
    lang: Optional[str] = None

    # Page Title (first <title> in document order)
    has_title: bool = False
    title_text: str = ""

    # The DOM Tree Structure
    root: Optional[ElementBase] = None

    # Every id attribute present in the document, used for fragment resolution
    element_ids: Set[str] = Field(default_factory=set)
