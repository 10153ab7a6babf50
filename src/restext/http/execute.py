# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Policy-wrapped and header-augmented request execution."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..config import DEFAULT_ACCEPT_LANGUAGE
from ..errors import categorize_exception
from .client import HttpClient
from .headers import XHR_HEADER, browser_headers, merge_headers
from .models import NO_STATUS, HttpRequest, HttpResponse
from .retry import Ok, RetryPolicy

logger = logging.getLogger(__name__)


def parse_json(response: HttpResponse) -> Any:
    return json.loads(response.text) if response.text else None


def execute_with_policy(
    client: HttpClient,
    request: HttpRequest,
    policy: RetryPolicy,
    *,
    parse: Callable[[HttpResponse], Any] | None = None,
) -> HttpResponse:
    """
    Run ``request`` through ``policy`` and always hand back a response.

    A captured failure becomes an ``ok=False`` response with no status and the
    failure on its error fields. With ``parse`` the decoded body lands in
    ``response.data``; a parse error is recorded on the response, not raised.
    """
    outcome = policy.execute_and_capture(lambda: client.request(request))

    if isinstance(outcome, Ok):
        response = outcome.value
        if parse is not None and response.ok:
            try:
                response.data = parse(response)
            except Exception as exc:  # noqa: BLE001
                response.error = exc
                response.error_message = str(exc)
                response.error_type = type(exc).__name__
        return response

    handled = outcome.final_handled_result
    response = HttpResponse(
        ok=False,
        status_code=NO_STATUS,
        request=request,
        error=outcome.exception,
        error_message=outcome.message,
        meta={"retry_attempts": outcome.attempts},
    )
    if outcome.exception is not None:
        response.error_type = type(outcome.exception).__name__
        response.error_category = categorize_exception(outcome.exception).value
    elif handled is not None:
        response.error = handled.error
        response.error_type = handled.error_type
        response.error_category = handled.error_category
        response.meta["final_status_code"] = handled.status_code
    return response


def execute_with_headers(
    client: HttpClient,
    request: HttpRequest,
    policy: RetryPolicy,
    *,
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
) -> HttpResponse:
    """
    Execute with a fresh cookie jar and browser-like headers.

    When no HTTP status comes back at all, one more attempt is made flagged as an
    XMLHttpRequest; that second response is returned whatever it is.
    """
    client.reset_cookies()

    request = replace(request, headers=merge_headers(request.headers, browser_headers(accept_language)))
    response = execute_with_policy(client, request, policy)

    if response.status_code == NO_STATUS:
        logger.debug("No status from %s, retrying as XMLHttpRequest", request.url)
        name, value = XHR_HEADER
        request = replace(request, headers=merge_headers(request.headers, {name: value}))
        response = execute_with_policy(client, request, policy)

    return response


__all__ = ["execute_with_headers", "execute_with_policy", "parse_json"]
