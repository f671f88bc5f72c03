# src/wcag_auditor/dom/qngine.py
import logging
from collections import Counter
from typing import List, Optional

from .models import HTMLDocument
from .core import ElementBase
from .registry import DOMRegistry
from .elements.heading import HeadingElement
from ..model import AccessibilityIssue, IssueLevel

logger = logging.getLogger(__name__)

INTERACTIVE_TAGS = {"a", "button", "input", "textarea", "select"}
LOW_CONTRAST_STYLES = ("color: #ccc", "color: #ddd")


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class QNGINE:
    """
    Quality Engine (QNGINE) for auditing HTML Documents against the WCAG rule table.

    It traverses the element tree constructed by the DOMBuilder in document order,
    applies the registered element rules to every node, and tracks the state needed
    for the document-level checks (heading hierarchy, landmarks, skip links).
    """

    # Rule ids reported by the document-level checks below
    DOCUMENT_RULES = [
        "WCAG 1.3.1", "WCAG 1.4.3", "WCAG 2.1.1", "WCAG 2.4.1",
        "WCAG 2.4.2", "WCAG 2.4.3", "WCAG 2.4.6", "WCAG 3.1.1",
    ]

    def __init__(self):
        """Initializes the engine by discovering and loading all available audit rules."""
        DOMRegistry.discover()
        self.rules = DOMRegistry.get_all_rules()

    @classmethod
    def rule_table(cls) -> List[str]:
        """Every rule identifier this engine can report."""
        DOMRegistry.discover()
        return sorted(set(DOMRegistry.get_all_rule_ids()) | set(cls.DOCUMENT_RULES))

    def run_audit(self, doc: HTMLDocument) -> List[AccessibilityIssue]:
        """
        Runs the full audit suite on a parsed HTMLDocument.

        Args:
            doc (HTMLDocument): The parsed document model.

        Returns:
            List[AccessibilityIssue]: Findings in document order, followed by
            the document-level findings.
        """
        findings: List[AccessibilityIssue] = []

        def add(level: str, rule: str, message: str, element: Optional[str] = None) -> None:
            findings.append(AccessibilityIssue(level=IssueLevel(level), rule=rule, message=message, element=element))

        # --- State Tracking for Global Checks ---
        group_index = Counter()
        element_index = 0
        interactive_index = 0
        previous_heading = 0
        h1_count = 0
        main_count = 0
        has_nav = False
        fragment_links = 0

        def traverse(node: ElementBase):
            nonlocal element_index, interactive_index, previous_heading, h1_count
            nonlocal main_count, has_nav, fragment_links

            role = node.attr('role')
            definition = DOMRegistry.get_definition(node.tag)
            locator = None
            if definition and isinstance(node, definition.model):
                locator = f"{node.tag}[{group_index[definition.group]}]"
                group_index[definition.group] += 1

            # Heading hierarchy: a level may only go one step deeper than its predecessor
            if isinstance(node, HeadingElement):
                if node.level > previous_heading + 1:
                    add("error", "WCAG 1.3.1",
                        f"Heading level skipped from h{previous_heading} to h{node.level}", locator)
                previous_heading = node.level
                if node.level == 1:
                    h1_count += 1

            # Apply all registered rules to the current node
            for rule in self.rules:
                for (level, rule_id, msg) in rule(node) or []:
                    add(level, rule_id, msg, locator)

            # Landmarks & skip-link bookkeeping
            if node.tag == 'main' or role == 'main':
                main_count += 1
            if node.tag == 'nav' or role == 'navigation':
                has_nav = True
            if node.tag == 'a' and (node.attr('href') or '').startswith('#'):
                fragment_links += 1

            # Keyboard navigation
            if node.tag in INTERACTIVE_TAGS or node.has_attr('tabindex'):
                tabindex = node.attr('tabindex')
                tab_value = _parse_int(tabindex)
                where = f"{node.tag}[{interactive_index}]"
                if tab_value is not None and tab_value > 0:
                    add("warning", "WCAG 2.4.3", "Positive tabindex can disrupt natural tab order", where)
                if tabindex == '-1' and node.tag in ('a', 'button'):
                    add("warning", "WCAG 2.1.1", "Interactive element removed from keyboard navigation", where)
                interactive_index += 1

            # Inline colour contrast (simplified pattern check)
            style = (node.attr('style') or '').lower()
            if style and any(pattern in style for pattern in LOW_CONTRAST_STYLES):
                add("warning", "WCAG 1.4.3", "Potential low color contrast detected", f"{node.tag}[{element_index}]")
            element_index += 1

            for child in node.children:
                traverse(child)

        if doc.root:
            for top in doc.root.children:
                traverse(top)

        # --- Post-Traversal Checks ---

        if h1_count == 0:
            add("error", "WCAG 2.4.6", "Page missing h1 heading")
        elif h1_count > 1:
            add("warning", "WCAG 2.4.6", "Page has multiple h1 headings")

        if main_count == 0:
            add("error", "WCAG 1.3.1", "Page missing main landmark")
        elif main_count > 1:
            add("error", "WCAG 1.3.1", "Page has multiple main landmarks")
        if not has_nav:
            add("info", "WCAG 1.3.1", "Page missing navigation landmark")

        if not doc.lang:
            add("error", "WCAG 3.1.1", "Page missing language declaration")
        elif len(doc.lang) < 2:
            add("error", "WCAG 3.1.1", "Invalid language code")

        if not doc.has_title:
            add("error", "WCAG 2.4.2", "Page missing title element")
        elif not doc.title_text:
            add("error", "WCAG 2.4.2", "Page title is empty")
        elif len(doc.title_text) < 3:
            add("warning", "WCAG 2.4.2", "Page title is too short")

        if main_count > 0 and fragment_links == 0:
            add("warning", "WCAG 2.4.1", "Page should include skip links for keyboard navigation")

        logger.debug("Audit finished with %d findings", len(findings))
        return findings
