# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade wiring a client and retry policy into the redirect resolver."""

from __future__ import annotations

from contextlib import suppress
from typing import Any

from .config import HttpSettings, load_http_settings
from .http.client import HttpClient, create_default_http_client
from .http.execute import execute_with_headers
from .http.models import HttpRequest, HttpResponse, RetryConfig
from .http.redirects import execute_with_redirects
from .http.retry import RetryPolicy
from .params import add_params_from_object, normalize_param_value


class RedirectResolver:
    """
    Convenience wrapper sharing one client and one retry policy across resolutions.

    The default client is built from ``settings``; pass ``insecure_skip_verify=True``
    to accept any TLS certificate.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        policy: RetryPolicy | None = None,
        settings: HttpSettings | None = None,
        *,
        insecure_skip_verify: bool | None = None,
    ):
        self.http_settings = settings or load_http_settings()
        self.http_client = http_client or create_default_http_client(
            self.http_settings, insecure_skip_verify=insecure_skip_verify
        )
        self.policy = policy or RetryPolicy(RetryConfig.from_settings(self.http_settings))

    def _build_request(
        self,
        url: str,
        method: str,
        headers: dict[str, str] | None,
        params: Any,
    ) -> HttpRequest:
        request = HttpRequest(url=url, method=method, headers=dict(headers or {}))
        if params is None:
            return request
        if isinstance(params, dict):
            for name, value in params.items():
                if value is not None:
                    request.add_param(name, normalize_param_value(value))
            return request
        return add_params_from_object(request, params)

    def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        params: Any = None,
    ) -> HttpResponse:
        """Single header-augmented execution, no redirect inference."""
        request = self._build_request(url, method, headers, params)
        return execute_with_headers(self.http_client, request, self.policy, accept_language=self.http_settings.accept_language)

    def resolve(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        params: Any = None,
        ignore_next_redirects: bool = False,
    ) -> HttpResponse:
        """Execute ``url`` and follow inferred redirects to the final response."""
        request = self._build_request(url, method, headers, params)
        return execute_with_redirects(
            self.http_client,
            request,
            self.policy,
            ignore_next_redirects,
            accept_language=self.http_settings.accept_language,
        )

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> RedirectResolver:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
