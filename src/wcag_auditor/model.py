from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, computed_field


class IssueLevel(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class AccessibilityIssue(BaseModel):
    """
    A single finding produced by the structural validator.

    `rule` is a stable identifier such as 'WCAG 1.1.1'. `element` is an optional
    locator of the form '<tag>[<index>]' where the index counts elements of the
    same rule group in document order.
    """
    level: IssueLevel
    rule: str
    message: str
    element: Optional[str] = None

    def __str__(self) -> str:
        where = f" ({self.element})" if self.element else ""
        return f"[{self.level.value}] {self.rule}: {self.message}{where}"


class AccessibilityReport(BaseModel):
    """Aggregated outcome of one validation run."""
    is_compliant: bool
    issues: List[AccessibilityIssue] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)

    def by_level(self, level: IssueLevel) -> List[AccessibilityIssue]:
        return [i for i in self.issues if i.level == level]

    @computed_field
    @property
    def error_count(self) -> int:
        return len(self.by_level(IssueLevel.ERROR))

    @computed_field
    @property
    def warning_count(self) -> int:
        return len(self.by_level(IssueLevel.WARNING))


class WcagViolation(BaseModel):
    """A conformance-level tagged violation found while gating a template save."""
    rule: str
    level: WcagLevel
    description: str
    element: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.rule} ({self.level.value}): {self.description}"
