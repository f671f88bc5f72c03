from typing import Optional, List
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec

GENERIC_LINK_TEXT = {"click here", "read more", "more", "link"}


class LinkElement(ElementBase):
    """
    Data model for anchor (<a href>) tags.
    Enriched by the DOMBuilder with fragment resolution against the document's ids.
    """
    tag: str = "a"
    has_external_marker: bool = False
    fragment_target_found: Optional[bool] = None

    @property
    def href(self) -> Optional[str]:
        """Convenience property to access the href attribute."""
        return self.attr('href')

    @property
    def target(self) -> Optional[str]:
        return self.attr('target')

    @property
    def rel(self) -> str:
        return self.attr('rel') or ''

    @property
    def is_external(self) -> bool:
        return bool(self.href) and self.href.startswith(('http', '//'))

    @property
    def is_fragment(self) -> bool:
        return bool(self.href) and self.href.startswith('#')


def parse_link(tag: Tag, children: list) -> LinkElement:
    """Parses an <a href> tag into the LinkElement model."""
    marker = tag.find(lambda t: "external" in (t.get("aria-label") or ""))
    return LinkElement(
        tag="a",
        attrs=dict(tag.attrs),
        text=tag.get_text(" ", strip=True),
        children=children,
        has_external_marker=marker is not None
    )


# --- AUDIT RULES ---


@audit_spec(rules=["WCAG 2.4.4"])
def check_link_text(node: LinkElement) -> List[AuditResult]:
    """Links need text, and that text should describe the destination."""
    if not node.text:
        return [("error", "WCAG 2.4.4", "Link has no accessible text")]
    if node.text.lower() in GENERIC_LINK_TEXT:
        return [("warning", "WCAG 2.4.4", "Link text is not descriptive")]
    return []


@audit_spec(rules=["SECURITY", "WCAG 3.2.5"])
def check_new_window(node: LinkElement) -> List[AuditResult]:
    """External links opened in a new browsing context."""
    res = []
    if not (node.is_external and node.target == '_blank'):
        return res

    rel_tokens = node.rel.lower().split()
    if 'noopener' not in rel_tokens and 'noreferrer' not in rel_tokens:
        res.append(("warning", "SECURITY", 'External link missing rel="noopener"'))

    if '(external)' not in (node.text or '') and not node.has_external_marker:
        res.append(("info", "WCAG 3.2.5", "External link should indicate it opens in new window"))
    return res


@audit_spec(rules=["WCAG 2.4.1"])
def check_fragment_target(node: LinkElement) -> List[AuditResult]:
    """In-page links must resolve to an element id."""
    if node.is_fragment and node.href != '#' and node.fragment_target_found is False:
        return [("error", "WCAG 2.4.1", "Skip link target not found")]
    return []


# --- ELEMENT DEFINITION ---

DEFINITION = ElementDefinition(
    tag_names=["a"],
    model=LinkElement,
    parser=parse_link,
    audit_rules=[check_link_text, check_new_window, check_fragment_target],
    matches=lambda tag: tag.has_attr("href")
)
