from typing import List
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec


class FormControlElement(ElementBase):
    """
    Model for input, textarea and select controls.
    Label association and required-indication are resolved by the DOMBuilder,
    because both depend on elements elsewhere in the document.
    """
    has_label: bool = False
    has_required_indicator: bool = False

    @property
    def is_hidden(self) -> bool:
        return (self.attr('type') or '').lower() == 'hidden'

    @property
    def is_required(self) -> bool:
        return self.has_attr('required')


def parse_form_control(tag: Tag, children: List[ElementBase]) -> FormControlElement:
    return FormControlElement(tag=tag.name, attrs=dict(tag.attrs), children=children)


# --- AUDIT RULES ---

@audit_spec(rules=["WCAG 1.3.1"])
def check_label(node: FormControlElement) -> List[AuditResult]:
    """Every visible control needs a label, aria-label or aria-labelledby."""
    if node.is_hidden or node.has_label:
        return []
    return [("error", "WCAG 1.3.1", "Form control missing accessible label")]


@audit_spec(rules=["WCAG 3.3.2"])
def check_required_indication(node: FormControlElement) -> List[AuditResult]:
    if node.is_hidden or not node.is_required or node.has_required_indicator:
        return []
    return [("warning", "WCAG 3.3.2", "Required field should be clearly indicated")]


DEFINITION = ElementDefinition(
    tag_names=["input", "textarea", "select"],
    model=FormControlElement,
    parser=parse_form_control,
    audit_rules=[check_label, check_required_indication],
    group="control"
)
