"""Shared helpers for the service layer."""
from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https")


def extract_domain(url: str) -> str | None:
    """
    Return the hostname of an absolute http(s) URL.

    Returns None if the URL cannot be parsed, has another scheme, or has no host.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return None
    return parsed.hostname or None
