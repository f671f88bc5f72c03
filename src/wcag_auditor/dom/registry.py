# src/wcag_auditor/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Callable, Any, Optional, Set

from .core import ElementDefinition

logger = logging.getLogger(__name__)


class DOMRegistry:
    """
    Central registry for DOM elements, parsers, and audit rules.

    Dynamically discovers and loads ElementDefinition modules from the
    'wcag_auditor.dom.elements' package to populate parsers, rules, and rule ids.
    """

    _definitions: Dict[str, ElementDefinition] = {}
    _audit_rules: List[Callable] = []
    _all_rules: Set[str] = set()
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all element definitions found in the 'wcag_auditor.dom.elements' package.

        This method scans the package for modules containing a `DEFINITION` attribute
        (instance of `ElementDefinition`). It registers parsers, audit rules, and
        collects all rule identifiers those rules can report.
        """
        if cls._loaded:
            return

        try:
            # Import the elements package to iterate over its modules
            import wcag_auditor.dom.elements as elements_pkg

            for _, name, _ in pkgutil.iter_modules(elements_pkg.__path__):
                full_name = f"wcag_auditor.dom.elements.{name}"
                try:
                    module = importlib.import_module(full_name)
                    if hasattr(module, "DEFINITION") and isinstance(module.DEFINITION, ElementDefinition):
                        defn = module.DEFINITION

                        for tag_name in defn.tag_names:
                            cls._definitions[tag_name] = defn

                        for rule in defn.audit_rules:
                            cls._register_rule(defn.model, rule)

                        cls._all_rules.update(defn.rules)

                        logger.debug("Element definition loaded: %s", ", ".join(defn.tag_names))
                except Exception as e:
                    logger.error("Error loading element module %s: %s", name, e)

            cls._loaded = True
        except ImportError as e:
            logger.error("Could not find elements package: %s", e)

    @classmethod
    def _register_rule(cls, model_type: Any, rule_func: Callable) -> None:
        """
        Registers a single audit rule, wrapping it with a type check.

        Args:
            model_type: The class type this rule applies to.
            rule_func: The function executing the logic.
        """
        def wrapped(node: Any) -> Any:
            if isinstance(node, model_type):
                return rule_func(node)
            return []

        cls._audit_rules.append(wrapped)

    @classmethod
    def get_definition(cls, tag_name: str) -> Optional[ElementDefinition]:
        """Retrieves the element definition registered for a specific HTML tag."""
        return cls._definitions.get(tag_name)

    @classmethod
    def get_all_rules(cls) -> List[Callable]:
        """Returns a list of all registered audit rule functions."""
        return cls._audit_rules

    @classmethod
    def get_all_rule_ids(cls) -> List[str]:
        """
        Returns every rule identifier the element rules can report.
        Document-level rule ids are contributed by the QNGINE.
        """
        return sorted(list(cls._all_rules))
