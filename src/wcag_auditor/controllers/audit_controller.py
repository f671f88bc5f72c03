import logging
from typing import List, Union

from bs4 import BeautifulSoup

from wcag_auditor.dom.builder import DOMBuilder
from wcag_auditor.dom.qngine import QNGINE
from wcag_auditor.model import AccessibilityIssue, AccessibilityReport, IssueLevel

logger = logging.getLogger(__name__)

ERROR_PENALTY = 10
WARNING_PENALTY = 5
# Fixed tolerance, not configurable
MAX_TOLERATED_WARNINGS = 2


def calculate_score(issues: List[AccessibilityIssue]) -> int:
    """100 minus 10 per error and 5 per warning, floored at 0."""
    errors = sum(1 for i in issues if i.level == IssueLevel.ERROR)
    warnings = sum(1 for i in issues if i.level == IssueLevel.WARNING)
    return max(0, 100 - errors * ERROR_PENALTY - warnings * WARNING_PENALTY)


def is_compliant(issues: List[AccessibilityIssue]) -> bool:
    errors = sum(1 for i in issues if i.level == IssueLevel.ERROR)
    warnings = sum(1 for i in issues if i.level == IssueLevel.WARNING)
    return errors == 0 and warnings <= MAX_TOLERATED_WARNINGS


class AccessibilityValidator:
    """
    Read-only structural validator. Builds the element tree, runs the QNGINE
    and turns its findings into a scored AccessibilityReport.

    validate() never raises: malformed input yields a single error-level
    VALIDATION_ERROR issue with score 0.
    """

    def __init__(self):
        self.builder = DOMBuilder()
        self.engine = QNGINE()

    def validate(self, document: Union[str, BeautifulSoup]) -> AccessibilityReport:
        try:
            doc = self.builder.parse_doc(document)
            issues = self.engine.run_audit(doc)
        except Exception as e:
            logger.error("Accessibility validation failed: %s", e, exc_info=True)
            return AccessibilityReport(
                is_compliant=False,
                issues=[AccessibilityIssue(
                    level=IssueLevel.ERROR,
                    rule="VALIDATION_ERROR",
                    message=f"Accessibility validation failed: {e}"
                )],
                score=0
            )

        report = AccessibilityReport(
            is_compliant=is_compliant(issues),
            issues=issues,
            score=calculate_score(issues)
        )
        logger.debug(
            "Validation complete: score=%d, errors=%d, warnings=%d",
            report.score, report.error_count, report.warning_count
        )
        return report

    @staticmethod
    def rule_table() -> List[str]:
        return QNGINE.rule_table()


def validate_accessibility(document: Union[str, BeautifulSoup]) -> AccessibilityReport:
    """Convenience wrapper around a fresh AccessibilityValidator."""
    return AccessibilityValidator().validate(document)
