# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .execute import execute_with_headers, execute_with_policy, parse_json
from .headers import XHR_HEADER, browser_headers, header_value, normalize_headers
from .httpx_client import HttpxClient
from .models import NO_STATUS, Headers, HttpRequest, HttpResponse, RetryConfig
from .redirects import URL_PATTERN, execute_with_redirects, get_url_from_response
from .retry import Failed, Ok, PolicyResult, RetryPolicy, build_default_retry_policy

__all__ = [
    "NO_STATUS",
    "URL_PATTERN",
    "XHR_HEADER",
    "Failed",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "Ok",
    "PolicyResult",
    "RetryConfig",
    "RetryPolicy",
    "StubHttpClient",
    "browser_headers",
    "build_default_retry_policy",
    "create_default_http_client",
    "execute_with_headers",
    "execute_with_policy",
    "execute_with_redirects",
    "get_url_from_response",
    "header_value",
    "normalize_headers",
    "parse_json",
]
