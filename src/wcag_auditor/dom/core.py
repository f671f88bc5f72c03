from typing import Dict, Any, List, Callable, Type, Optional, Tuple, Set, Sequence
from pydantic import BaseModel, Field
from bs4 import Tag


def audit_spec(rules: List[str]):
    """
    Decorator to declare which rule identifiers a specific audit rule function returns.
    Facilitates auto-discovery by the DOMRegistry.
    """
    def decorator(func):
        func.defined_rules = rules
        return func
    return decorator


class ElementBase(BaseModel):
    """
    Base data model representing a generic DOM element in the simplified tree.
    """
    tag: str
    attrs: Dict[str, Any] = Field(default_factory=dict)
    text: Optional[str] = ""
    children: List['ElementBase'] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Returns True if the element contains no text and no children."""
        return not self.text and not self.children

    def attr(self, name: str) -> Optional[str]:
        """
        Returns an attribute as a plain string.
        BeautifulSoup hands out multi-valued attributes (class, rel) as lists.
        """
        value = self.attrs.get(name)
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value

    def has_attr(self, name: str) -> bool:
        return name in self.attrs


# Type alias for audit findings: (Level, RuleId, Message)
AuditResult = Tuple[str, str, str]


class ElementDefinition:
    """
    Configuration object binding one or more HTML tags to their model, parser, and rules.

    `group` names the locator sequence the element is counted in ('img' -> img[0], img[1]).
    `matches` optionally narrows which tags use this definition (e.g. only <a> with href).
    """

    def __init__(
            self,
            tag_names: Sequence[str],
            model: Type[ElementBase],
            parser: Callable[[Tag, List[ElementBase]], ElementBase],
            audit_rules: Optional[List[Callable[[Any], List[AuditResult]]]] = None,
            group: Optional[str] = None,
            matches: Optional[Callable[[Tag], bool]] = None,
            possible_rules: Optional[List[str]] = None
    ):
        self.tag_names = list(tag_names)
        self.model = model
        self.parser = parser
        self.audit_rules = audit_rules or []
        self.group = group or self.tag_names[0]
        self.matches = matches

        # --- Auto-Discovery of Rule Ids ---
        final_rules: Set[str] = set(possible_rules or [])

        for rule in self.audit_rules:
            if hasattr(rule, 'defined_rules'):
                final_rules.update(rule.defined_rules)

        self.rules = sorted(list(final_rules))
