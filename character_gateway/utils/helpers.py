"""
Utility helper functions for the character gateway.

URL composition, resource identifier validation and credential scrubbing.
"""

import re
from typing import Optional
from urllib.parse import quote, quote_plus


REDACTED = "***"

_RESOURCE_PATTERN = re.compile(r"^[A-Za-z0-9._~\-]+(/[A-Za-z0-9._~\-]+)*$")


def build_upstream_url(base_url: str, path: str) -> str:
    """
    Build the upstream URL from a base URL and a resource path.

    Args:
        base_url: Base URL of the upstream API
        path: Resource path to append to the base URL

    Returns:
        Complete upstream URL, without query string

    Examples:
        ("https://anapioficeandfire.com/api/", "/characters/3000")
        -> "https://anapioficeandfire.com/api/characters/3000"
    """
    base_url = base_url.rstrip('/')
    path = path.lstrip('/') if path else ""

    if path:
        return f"{base_url}/{path}"
    return base_url


def validate_resource_path(resource: Optional[str]) -> str:
    """
    Validate an upstream resource identifier.

    The identifier must be a non-empty relative path made of URL-safe
    segments, e.g. ``characters/3000``. Surrounding whitespace and slashes
    are stripped.

    Raises:
        ValueError: If the identifier is empty, escapes the base path or
            contains characters that would need URL encoding.
    """
    if resource is None:
        raise ValueError("Resource identifier must not be empty")

    cleaned = resource.strip().strip('/')
    if not cleaned:
        raise ValueError("Resource identifier must not be empty")

    if not _RESOURCE_PATTERN.match(cleaned):
        raise ValueError(f"Invalid resource identifier: {resource!r}")

    if any(segment in (".", "..") for segment in cleaned.split('/')):
        raise ValueError("Resource identifier must not contain '.' or '..' segments")

    return cleaned


def redact_secret(text: str, secret: Optional[str]) -> str:
    """
    Replace every occurrence of ``secret`` in ``text`` with ``***``.

    Args:
        text: Text that may contain the secret (e.g. an exception message
            that embeds a request URL)
        secret: The secret value, or None when no credential is configured

    Returns:
        The scrubbed text
    """
    if not text or not secret:
        return text

    # A credential sent as a query parameter shows up percent-encoded in URLs.
    for form in {secret, quote(secret, safe=""), quote_plus(secret)}:
        text = text.replace(form, REDACTED)
    return text


def truncate_string(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length including suffix
        suffix: Suffix to add when truncating

    Returns:
        Truncated string
    """
    if not text or len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
