# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
restext package entrypoint.

Extension helpers for an HTTP client: retry-policy execution that never raises,
browser-like default headers, redirect inference from ``Location`` headers and
URL-valued query parameters, and request parameters taken from plain objects.
"""

from .config import HttpSettings, load_http_settings
from .errors import ErrorCategory
from .http import (
    NO_STATUS,
    Failed,
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    Ok,
    RetryConfig,
    RetryPolicy,
    create_default_http_client,
    execute_with_headers,
    execute_with_policy,
    execute_with_redirects,
    get_url_from_response,
)
from .log import setup_logging
from .params import ParamField, add_params_from_object, normalize_param_value, param_mapping
from .runtime import RedirectResolver
from .version import __version__

__all__ = [
    "NO_STATUS",
    "ErrorCategory",
    "Failed",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "Ok",
    "ParamField",
    "RedirectResolver",
    "RetryConfig",
    "RetryPolicy",
    "add_params_from_object",
    "create_default_http_client",
    "execute_with_headers",
    "execute_with_policy",
    "execute_with_redirects",
    "get_url_from_response",
    "load_http_settings",
    "normalize_param_value",
    "param_mapping",
    "setup_logging",
    "__version__",
]
