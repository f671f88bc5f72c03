# src/cms_core/core/utils/json_utils.py
import json
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ValidationError

from cms_core.core.exceptions import format_validation_errors


def load_json_model(path: str, model: type[BaseModel]) -> BaseModel:
    """
    Reads a JSON document into a model.

    Raises:
        ValueError: unreadable file, invalid JSON or a record that fails validation.
    """
    try:
        raw: Dict[str, Any] = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ValueError(f"Could not load {path}: {e}") from e

    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid {model.__name__} in {path}: " + "; ".join(format_validation_errors(e))) from e


def to_json(data: Any, indent: int = 2, ensure_ascii: bool = False) -> str:
    """Pretty-printed JSON text for reports and exports."""
    return json.dumps(data, ensure_ascii=ensure_ascii, indent=indent)
