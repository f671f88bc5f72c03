from typing import List
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


class HeadingElement(ElementBase):
    """
    Model representing a heading element (h1-h6).
    Stores the heading level for structural analysis.
    """
    level: int


def parse_heading(tag: Tag, children: List[ElementBase]) -> HeadingElement:
    """
    Parses heading tags and determines their hierarchy level (e.g., h1 -> 1).
    """
    try:
        level = int(tag.name[1])
    except (ValueError, IndexError, TypeError):
        level = 0

    return HeadingElement(
        tag=tag.name,
        attrs=dict(tag.attrs),
        text=tag.get_text(" ", strip=True),
        children=children,
        level=level
    )


# --- AUDIT RULES ---
# Hierarchy and h1 counting need document order, so the QNGINE tracks those.

@audit_spec(rules=["WCAG 2.4.6"])
def check_heading_not_empty(node: HeadingElement) -> List[AuditResult]:
    """Rule: A heading must carry text content."""
    if not node.text:
        return [("error", "WCAG 2.4.6", "Empty heading found")]
    return []


# --- ELEMENT DEFINITION ---

DEFINITION = ElementDefinition(
    tag_names=HEADING_TAGS,
    model=HeadingElement,
    parser=parse_heading,
    audit_rules=[check_heading_not_empty],
    group="heading",
    possible_rules=["WCAG 1.3.1"]
)
