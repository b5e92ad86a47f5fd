"""
Logging setup for the OctaMart API.

Every module logs through the standard library:

    from octamart.logging import get_logger
    logger = get_logger(__name__)

Values that come from requests (ids, emails, search terms, URLs) go
through one of the sanitizers below before they reach a log line.
"""

import logging
import os
import sys
from functools import cache
from urllib.parse import urlsplit, urlunsplit

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Every Supabase and image download call is an httpx request
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "storage3", "supabase_auth")


def _level_from_env() -> int:
    return getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def configure_logging(level: int | None = None) -> None:
    """Quiet the HTTP client loggers; add a stdout root handler unless one exists."""
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return

    level = level if level is not None else _level_from_env()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    # Vercel prefixes its own timestamps
    on_vercel = os.environ.get("VERCEL") == "1"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if on_vercel else LOG_FORMAT))
    root.addHandler(handler)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Neutralize line breaks and NULs (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None) -> str:
    """First 8 characters of an id, enough to correlate UUIDs; "N/A" when empty."""
    if not id_value:
        return "N/A"
    return _escape_log_injection(str(id_value))[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """
    Escape and truncate free text (search terms, category names, paths).

    Returns "N/A" for empty values and appends "..." when truncated.
    """
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


def mask_email_for_logging(email: str | None) -> str:
    """
    Keep the first two characters of the local part and the domain.

    >>> mask_email_for_logging("budi.santoso@example.com")
    'bu***@example.com'
    """
    if not email:
        return "N/A"
    local, sep, domain = str(email).strip().partition("@")
    if not sep:
        return sanitize_string_for_logging(local[:2] + "***")
    return sanitize_string_for_logging(f"{local[:2]}***@{domain}", max_length=80)


def sanitize_url_for_logging(url: str | None, max_length: int = 120) -> str:
    """URL without credentials, query or fragment."""
    if not url:
        return "N/A"
    try:
        parts = urlsplit(str(url))
        netloc = parts.hostname or ""
        if parts.port:
            netloc = f"{netloc}:{parts.port}"
    except ValueError:
        return sanitize_string_for_logging(str(url).split("?", 1)[0], max_length)
    return sanitize_string_for_logging(urlunsplit((parts.scheme, netloc, parts.path, "", "")), max_length)


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_logger",
    "mask_email_for_logging",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
    "sanitize_url_for_logging",
]
