import re
from typing import List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec

FILENAME_ALT = re.compile(r"\.(jpe?g|png|gif|svg|webp)\b", re.IGNORECASE)


class ImageElement(ElementBase):
    tag: str = "img"

    @property
    def src(self) -> str: return self.attr('src') or ''

    @property
    def alt(self) -> Optional[str]: return self.attr('alt')

    @property
    def role(self) -> Optional[str]: return self.attr('role')


def parse_image(tag: Tag, children: list) -> ImageElement:
    return ImageElement(tag="img", attrs=dict(tag.attrs), children=children)


# --- RULES ---

@audit_spec(rules=["WCAG 1.1.1"])
def check_alt_text(node: ImageElement) -> List[AuditResult]:
    res = []
    # alt=None means the attribute is missing
    if node.alt is None:
        res.append(("error", "WCAG 1.1.1", "Image missing alt attribute"))
        return res

    if node.alt and FILENAME_ALT.search(node.alt):
        res.append((
            "warning", "WCAG 1.1.1",
            "Alt text appears to be a filename rather than descriptive text"
        ))

    # alt="" without a role is the accepted decorative pattern
    if node.alt == "" and not node.role:
        res.append(("info", "WCAG 1.1.1", "Image has empty alt text (decorative image)"))

    return res


# --- DEFINITION ---
DEFINITION = ElementDefinition(
    tag_names=["img"],
    model=ImageElement,
    parser=parse_image,
    audit_rules=[check_alt_text]
)
