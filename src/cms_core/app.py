from __future__ import annotations

import logging
import sys
from typing import Callable, Dict

from cms_core.core.handlers.audit_handler import handle_audit
from cms_core.core.handlers.render_handler import handle_render
from cms_core.core.handlers.template_handler import handle_template
from cms_core.core.managers.config_manager import config_manager
from cms_core.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

COMMANDS: Dict[str, Callable[[list[str]], int]] = {
    "audit": handle_audit,
    "render": handle_render,
    "template": handle_template,
}


def _print_usage() -> None:
    print("usage: cms-core {audit,render,template} ...")
    print("  audit     Check HTML files against the WCAG rule table")
    print("  render    Render a template definition with a content record")
    print("  template  Template utilities (validate)")


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the cms-core command line."""
    configure_logger(
        config_manager.get_nested("debug.level", "WARNING"),
        config_manager.get_nested("debug.module_levels", {}),
    )

    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in ("-h", "--help"):
        _print_usage()
        return 0

    handler = COMMANDS.get(args[0])
    if handler is None:
        print(f"❌ Unknown command: {args[0]}")
        _print_usage()
        return 1

    logger.debug("Dispatching '%s' with %s", args[0], args[1:])
    return handler(args[1:])


if __name__ == "__main__":
    sys.exit(main())
