"""Jira site normalization.

Users type their site in many shapes ("acme", "acme.atlassian.net",
"https//acme.atlassian.net/"). Everything downstream expects a canonical
base URL without trailing slash.
"""

import re
from urllib.parse import urlparse

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_base_url(value) -> str:
    """Turn a user-supplied Jira site into a base URL.

    Examples:
        "acme"                 -> "https://acme.atlassian.net"
        "acme.atlassian.net"   -> "https://acme.atlassian.net"
        "https//jira.acme.io/" -> "https://jira.acme.io"
    """
    if not value:
        return ""

    s = str(value).strip()
    lower = s.lower()

    # Missing colon after the scheme
    if lower.startswith("https//"):
        s = "https://" + s[len("https//"):]
    elif lower.startswith("http//"):
        s = "http://" + s[len("http//"):]

    s = s.rstrip("/")

    match = _SCHEME_RE.match(s)
    if match:
        return match.group(0).lower() + s[match.end():]
    if not s:
        return ""
    if "." in s:
        return f"https://{s}"
    return f"https://{s}.atlassian.net"


def host_of(base_url: str) -> str:
    """Network location of a normalized base URL."""
    return urlparse(base_url).netloc
