"""Mask credentials in log output."""

import logging
import re

REDACTED = "<redacted>"

_PATTERNS = (
    (
        re.compile(r"(password|pwd)\s*[:=]\s*([^\s\"']+)", re.IGNORECASE),
        lambda m: f"{m.group(1)}: {REDACTED}",
    ),
    (
        re.compile(r"(token)\s*[:=]\s*([^\s\"']+)", re.IGNORECASE),
        lambda m: f"{m.group(1)}: {REDACTED}",
    ),
    (
        re.compile(
            r"(authorization)\s*[:=]?\s*Bearer\s+([A-Za-z0-9\-._~+/]+=*)",
            re.IGNORECASE,
        ),
        lambda m: f"{m.group(1)}: Bearer {REDACTED}",
    ),
    (
        re.compile(r"(username|user)\s*[:=]\s*([^\s\"']+)", re.IGNORECASE),
        lambda m: f"{m.group(1)}: {REDACTED}",
    ),
)


def redact(text: str | None) -> str:
    """Replace password, token, bearer and username values with a marker."""
    if not text:
        return ""
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class RedactingFilter(logging.Filter):
    """Logging filter that redacts secrets from formatted messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the record message in place. Never drops records."""
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True
