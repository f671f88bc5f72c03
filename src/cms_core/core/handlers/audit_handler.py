# src/cms_core/core/handlers/audit_handler.py
import argparse
import logging
from pathlib import Path
from typing import Dict

from tqdm.auto import tqdm

from cms_core.core.managers.config_manager import config_manager
from cms_core.core.utils.json_utils import to_json
from wcag_auditor.controllers.audit_controller import AccessibilityValidator
from wcag_auditor.model import AccessibilityReport

logger = logging.getLogger(__name__)


def handle_audit(args: list[str]) -> int:
    """
    Handler for 'audit': runs the structural validator over HTML files.
    """
    parser = argparse.ArgumentParser(prog="audit")
    parser.add_argument("files", nargs="*", help="HTML files to audit.")
    parser.add_argument("--export", type=str, default=None, help="Write the JSON reports to this file.")
    parser.add_argument("--rules", action="store_true", help="List the rule identifiers and exit.")

    try:
        parsed_args = parser.parse_args(args)
    except SystemExit:
        return 1

    if parsed_args.rules:
        for rule in AccessibilityValidator.rule_table():
            print(rule)
        return 0

    if not parsed_args.files:
        parser.print_help()
        return 0

    validator = AccessibilityValidator()
    reports: Dict[str, AccessibilityReport] = {}

    for file_name in tqdm(parsed_args.files, desc="Auditing", unit="file"):
        path = Path(file_name)
        try:
            html = path.read_text(encoding="utf-8")
        except OSError as e:
            print(f"❌ Could not read {path}: {e}")
            return 1
        reports[str(path)] = validator.validate(html)

    for name, report in reports.items():
        mark = "✅" if report.is_compliant else "❌"
        print(
            f"{mark} {name}: score {report.score}, "
            f"{report.error_count} error(s), {report.warning_count} warning(s)"
        )
        for issue in report.issues:
            print(f"   {issue}")

    if parsed_args.export:
        export_path = Path(parsed_args.export)
        payload = {name: report.model_dump(mode="json") for name, report in reports.items()}
        try:
            export_path.write_text(to_json(payload), encoding="utf-8")
            print(f"📄 Reports written to {export_path}")
        except OSError as e:
            print(f"❌ Could not write {export_path}: {e}")
            return 1

    failed = [name for name, report in reports.items() if not report.is_compliant]
    if failed and config_manager.get_nested("audit.fail_on_non_compliant", True):
        return 1
    return 0
