# src/cms_core/core/handlers/template_handler.py
import argparse
import logging

from cms_core.core.utils.json_utils import load_json_model
from cms_core.core.services.template_validation_service import TemplateValidationService
from cms_core.model import Template

logger = logging.getLogger(__name__)


def handle_template(args: list[str]) -> int:
    """
    Handler for 'template' commands. 'validate' runs the save gate
    against a template definition without storing anything.
    """
    parser = argparse.ArgumentParser(prog="template")
    subparsers = parser.add_subparsers(dest="subcommand", help="Template subcommands")

    validate_parser = subparsers.add_parser("validate", help="Validate a template definition (JSON)")
    validate_parser.add_argument("file", help="Template definition (JSON).")

    try:
        if not args:
            parser.print_help()
            return 0
        parsed_args = parser.parse_args(args)
    except SystemExit:
        return 1

    if parsed_args.subcommand == "validate":
        return _handle_validate(parsed_args)
    return 0


def _handle_validate(parsed_args: argparse.Namespace) -> int:
    try:
        template = load_json_model(parsed_args.file, Template)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    result = TemplateValidationService().validate_template(template)

    for error in result.errors:
        print(f"❌ {error}")
    for warning in result.warnings:
        print(f"⚠️  {warning}")

    if result.is_valid:
        score = result.report.score if result.report else "-"
        print(f"✅ Template '{template.name}' is valid (accessibility score {score}).")
        return 0
    print(f"❌ Template '{template.name}' would be rejected ({len(result.errors)} error(s)).")
    return 1
