import re

# Minimal filter: strips script blocks, double-quoted inline handlers and the
# javascript: scheme. Everything else passes through unchanged.
SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
EVENT_HANDLER = re.compile(r'on\w+="[^"]*"', re.IGNORECASE)
JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


def sanitize_html(html: str) -> str:
    """Applies the rich-text filter to a markup fragment."""
    sanitized = SCRIPT_BLOCK.sub("", html)
    sanitized = EVENT_HANDLER.sub("", sanitized)
    return JAVASCRIPT_SCHEME.sub("", sanitized)
