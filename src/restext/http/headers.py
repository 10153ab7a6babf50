# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header utilities and the default browser-like header set.

HTTP header field names are case-insensitive (RFC 9110) and httpx reports them
lowercased, so lookups here never depend on the casing a server used.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config import DEFAULT_ACCEPT_LANGUAGE

XHR_HEADER = ("X-Requested-With", "XMLHttpRequest")


def browser_headers(accept_language: str = DEFAULT_ACCEPT_LANGUAGE) -> dict[str, str]:
    """Headers sent with every execution so requests resemble a desktop browser."""
    return {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": accept_language,
        "Connection": "keep-alive",
        "Accept-Encoding": "gzip",
        "TE": "Trailers",
    }


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers and iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        try:
            return dict(items())
        except (TypeError, ValueError):
            pass

    try:
        return dict(headers)
    except (TypeError, ValueError):
        return None


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    The value is returned as stored; only a missing header yields ``default``.
    """
    if not headers or not name:
        return default

    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return default

    lower = str(name).lower()
    for key in (name, lower, lower.title()):
        if key in coerced:
            value = coerced.get(key)
            return default if value is None else str(value)

    for key, value in coerced.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value)

    return default


def merge_headers(base: Mapping[str, str] | None, extra: Mapping[str, str]) -> dict[str, str]:
    """Overlay ``extra`` on ``base``, replacing same-named headers regardless of case."""
    merged = dict(base or {})
    for name, value in extra.items():
        lower = name.lower()
        for existing in [key for key in merged if key.lower() == lower]:
            del merged[existing]
        merged[name] = value
    return merged


__all__ = ["XHR_HEADER", "browser_headers", "header_value", "merge_headers", "normalize_headers"]
