"""Helpers for safe logging.

Feed payloads come from an untrusted remote peer and endpoint addresses may
embed credentials. These helpers bound what ends up in log records.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

_DEFAULT_MAX_PREVIEW = 200


def preview_payload(raw: object, *, max_length: int = _DEFAULT_MAX_PREVIEW) -> str:
    """Return a short, printable representation of an inbound payload."""
    if isinstance(raw, (bytes, bytearray)):
        text = bytes(raw).decode("utf-8", errors="replace")
    elif isinstance(raw, str):
        text = raw
    else:
        # Fallback: represent unknown objects without dumping internals.
        return f"<{type(raw).__name__}>"

    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_length:
        return f"{text[:max_length]}…<truncated>"
    return text


def redact_url(url: str) -> str:
    """Strip the password (if any) from a URL's userinfo."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    if parts.password is None:
        return url

    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{parts.username}:<redacted>@{host}"
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is not None:
        netloc = f"{netloc}:{port}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))
