"""Domain key extraction for availability aggregation."""

from __future__ import annotations

from urllib.parse import urlsplit

_CONTROL_CHARS = frozenset(chr(c) for c in range(0x20)) | {"\x7f"}


def extract_domain(url: str) -> str:
    """Return the aggregation key for *url*: its host without any port.

    Userinfo is dropped and the host is truncated at the first colon, so
    ``https://user@api.test:8443/x`` maps to ``api.test``. A URL that cannot be
    parsed maps to the raw string itself, so every endpoint lands in some
    bucket (this includes a non-numeric port). Never raises.
    """
    if any(ch in _CONTROL_CHARS for ch in url):
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        # e.g. unbalanced IPv6 brackets
        return url

    host = parts.netloc.rpartition("@")[2]
    if " " in host:
        return url

    host, _, port = host.partition(":")
    if port and not port.isdigit() and not host.startswith("["):
        return url
    return host
