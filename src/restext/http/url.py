# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by the redirect resolver."""

from __future__ import annotations

from urllib.parse import parse_qsl, urljoin, urlsplit


def url_host(url: str | None) -> str | None:
    """Return the lowercased host of ``url`` or None when it has none or cannot be parsed."""
    if not url:
        return None
    try:
        host = urlsplit(str(url)).hostname
    except ValueError:
        return None
    return host or None


def same_host(a: str | None, b: str | None) -> bool:
    """Return True when both URLs resolve to the same host (ports and schemes ignored)."""
    return url_host(a) == url_host(b)


def resolve_location(base_url: str | None, location: str | None) -> str | None:
    """
    Turn a redirect candidate into an absolute URL.

    Relative candidates are joined onto ``base_url``. Anything that does not parse, or
    that still lacks a scheme and host afterwards, is not a usable location.
    """
    if not location:
        return None
    candidate = str(location).strip()
    if not candidate:
        return None
    if candidate.lower().startswith("www."):
        candidate = f"http://{candidate}"
    try:
        absolute = urljoin(base_url or "", candidate)
        parts = urlsplit(absolute)
        # Touch the port so malformed authorities ("host:abc") are rejected here.
        _ = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts.geturl()


def query_values(url: str | None) -> list[str]:
    """Decoded query-string values of ``url`` in the order they appear."""
    if not url:
        return []
    try:
        query = urlsplit(str(url)).query
    except ValueError:
        return []
    return [value for _, value in parse_qsl(query, keep_blank_values=True)]


__all__ = ["query_values", "resolve_location", "same_host", "url_host"]
