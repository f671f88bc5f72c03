# src/cms_core/core/exceptions.py
from typing import List, Optional

from pydantic import ValidationError


def format_validation_errors(exc: ValidationError) -> List[str]:
    """Flattens a pydantic ValidationError into '<dotted.location>: <message>' strings."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        messages.append(f"{location}: {err.get('msg')}")
    return messages


class CMSError(Exception):
    """Base class for all errors raised by the CMS core."""


class TemplateNotFoundError(CMSError, LookupError):
    def __init__(self, template_id: str):
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class TemplateInactiveError(CMSError):
    def __init__(self, template_id: str):
        super().__init__(f"Template is not active: {template_id}")
        self.template_id = template_id


class TemplateValidationError(CMSError, ValueError):
    """
    A template write was rejected. `errors` holds the blocking messages,
    `violations` the accessibility issues behind them (if any).
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None, violations: Optional[list] = None):
        details = ", ".join(errors or [])
        super().__init__(f"{message}: {details}" if details else message)
        self.errors = list(errors or [])
        self.violations = list(violations or [])


class ContentNotFoundError(CMSError, LookupError):
    def __init__(self, message: str):
        super().__init__(message)


class ContentValidationError(CMSError, ValueError):
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        details = ", ".join(errors or [])
        super().__init__(f"{message}: {details}" if details else message)
        self.errors = list(errors or [])


class SlugConflictError(ContentValidationError):
    def __init__(self, slug: str):
        super().__init__("Content with this title already exists", [f"slug: '{slug}' is already in use"])
        self.slug = slug


class ContentStateError(CMSError):
    """Raised for a lifecycle transition that is not allowed from the current status."""


class VersionNotFoundError(ContentNotFoundError):
    def __init__(self, content_id: str, version: int):
        super().__init__(f"Content version not found: {content_id} v{version}")
        self.content_id = content_id
        self.version = version
