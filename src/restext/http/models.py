# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across restext."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import HttpSettings
from ..errors import ErrorCategory

Headers = dict[str, str]
Params = list[tuple[str, Any]]

# Status reported when the transport produced no HTTP status at all.
NO_STATUS = 0

QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE", "OPTIONS"})


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    params: Params = field(default_factory=list)
    body: bytes | str | None = None
    timeout: float | None = None
    # None defers to the client's configured redirect policy.
    allow_redirects: bool | None = None

    def add_header(self, name: str, value: str) -> HttpRequest:
        if self.headers is None:
            self.headers = {}
        self.headers[name] = value
        return self

    def add_param(self, name: str, value: Any) -> HttpRequest:
        self.params.append((name, value))
        return self

    @property
    def params_in_query(self) -> bool:
        """True when params belong in the query string rather than a form body."""
        return self.method.upper() in QUERY_METHODS or self.body is not None


@dataclass
class HttpResponse:
    """Normalized HTTP response; failures are carried as data rather than raised."""

    ok: bool
    status_code: int = NO_STATUS
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    request: HttpRequest | None = None
    error: BaseException | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_category: str | None = None
    data: Any = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def has_status(self) -> bool:
        return self.status_code != NO_STATUS

    def discard_body(self) -> None:
        """Drop the payload once it is no longer needed."""
        self.text = ""
        self.content = b""

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "status_code": self.status_code,
            "url": self.url,
            "headers": dict(self.headers),
            "error_message": self.error_message,
            "error_type": self.error_type,
            "error_category": self.error_category,
            "meta": dict(self.meta),
        }


@dataclass
class RetryConfig:
    """Retry policy for HTTP requests derived from HttpSettings."""

    max_attempts: int = 2
    backoff_factor: float = 2.0
    initial_delay: float = 1.0
    retry_budget: float | None = None
    retry_statuses: frozenset[int] = frozenset()
    retry_on: frozenset[str] = frozenset(
        {
            ErrorCategory.TIMEOUT.value,
            ErrorCategory.CONNECTION_ERROR.value,
            ErrorCategory.DNS_ERROR.value,
            ErrorCategory.UNKNOWN_ERROR.value,
        }
    )
    retry_never: frozenset[str] = frozenset({ErrorCategory.WAF_SUSPECTED.value, ErrorCategory.SSL_ERROR.value})

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> RetryConfig:
        """Build a retry config from the shared HttpSettings."""
        max_attempts = max(1, settings.max_retries)
        budget: float | None = None
        if settings.timeout and settings.timeout > 0:
            budget = settings.retry_budget_multiplier * max_attempts * settings.timeout
            if settings.retry_budget_cap and settings.retry_budget_cap > 0:
                budget = min(budget, settings.retry_budget_cap)
        return cls(
            max_attempts=max_attempts,
            backoff_factor=settings.backoff_factor,
            initial_delay=settings.initial_delay,
            retry_budget=budget,
        )
