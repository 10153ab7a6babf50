# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Redirect following on top of header-augmented execution.

Next hops come from a ``Location`` header or, failing that, from a URL-shaped
query-string value in the resolved response URI (``?continue=https://...``).
The loop stops once a hop yields no new location.
"""

from __future__ import annotations

import logging
import re

from ..config import DEFAULT_ACCEPT_LANGUAGE
from .client import HttpClient
from .execute import execute_with_headers
from .headers import header_value
from .models import HttpRequest, HttpResponse
from .retry import RetryPolicy
from .url import query_values, resolve_location, same_host

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(
    r"(https?://(?:www\.|(?!www))[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
    r"|www\.[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
    r"|https?://(?:www\.|(?!www))[a-zA-Z0-9]+\.[^\s]{2,}"
    r"|www\.[a-zA-Z0-9]+\.[^\s]{2,})"
)


def get_url_from_response(response: HttpResponse | None) -> str | None:
    """Return the raw next-location candidate carried by ``response``, if any."""
    if response is None or not response.url:
        return None

    location = header_value(response.headers, "Location")
    if location:
        return location

    for value in query_values(response.url):
        match = URL_PATTERN.search(value)
        if match:
            return match.group(0)
    return None


def execute_with_redirects(
    client: HttpClient,
    request: HttpRequest,
    policy: RetryPolicy,
    ignore_next_redirects: bool = False,
    *,
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
) -> HttpResponse:
    """
    Follow redirect signals until a hop produces no new location.

    Only the previous location is remembered, so the loop ends when a hop points
    at the location just followed. When a hop has no candidate, its resolved URI
    is re-resolved once (``ignore_next_redirects`` stops deeper nesting) and the
    nested result wins only if it stayed on the same host.
    """
    last_location: str | None = None
    chain: list[str] = []

    while True:
        response = execute_with_headers(client, request, policy, accept_language=accept_language)
        response.discard_body()

        location = resolve_location(response.url, get_url_from_response(response))

        if location is not None and location != last_location:
            logger.debug("Following %s -> %s", request.url, location)
            last_location = location
            chain.append(location)
            request = HttpRequest(url=location)
            continue

        response.meta["redirect_chain"] = chain
        if response.url and not ignore_next_redirects:
            redirect = execute_with_redirects(
                client,
                HttpRequest(url=response.url),
                policy,
                True,
                accept_language=accept_language,
            )
            if same_host(redirect.url, response.url):
                redirect.meta["redirect_chain"] = chain + redirect.meta.get("redirect_chain", [])
                return redirect
            logger.debug("Ignoring redirect from %s to foreign host %s", response.url, redirect.url)

        return response


__all__ = ["URL_PATTERN", "execute_with_redirects", "get_url_from_response"]
