# src/cms_core/core/handlers/render_handler.py
import argparse
import logging
from pathlib import Path

from cms_core.core.utils.json_utils import load_json_model
from cms_core.model import Content, Template, parse_field_values
from renderer.controllers.render_controller import TemplateRenderer

logger = logging.getLogger(__name__)


def handle_render(args: list[str]) -> int:
    """
    Handler for 'render': renders a template definition with a content record.
    Field values come from the content body (JSON object or plain text).
    """
    parser = argparse.ArgumentParser(prog="render")
    parser.add_argument("template", help="Template definition (JSON).")
    parser.add_argument("content", help="Content record (JSON).")
    parser.add_argument("--out", type=str, default=None, help="Write the rendered page to this file.")
    parser.add_argument("--audit", action="store_true", help="Print the accessibility report of the result.")

    try:
        parsed_args = parser.parse_args(args)
    except SystemExit:
        return 1

    try:
        template = load_json_model(parsed_args.template, Template)
        content = load_json_model(parsed_args.content, Content)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    if not template.is_active:
        print(f"❌ Template '{template.name}' is not active.")
        return 1

    result = TemplateRenderer().render(template, content, parse_field_values(content.body), audit=parsed_args.audit)

    for warning in result.warnings:
        print(f"⚠️  {warning}")
    if result.errors:
        for error in result.errors:
            print(f"❌ {error}")
        return 1

    if parsed_args.out:
        Path(parsed_args.out).write_text(result.html, encoding="utf-8")
        print(f"✅ Rendered '{content.title}' to {parsed_args.out}")
    else:
        print(result.html)

    if result.report is not None:
        report = result.report
        print(f"Accessibility score: {report.score} (compliant: {'yes' if report.is_compliant else 'no'})")
        for issue in report.issues:
            print(f"   {issue}")
    return 0
