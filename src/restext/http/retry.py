# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry policy with execute-and-capture semantics.

``RetryPolicy.execute_and_capture`` runs a zero-argument action, retries it with
exponential backoff and never raises: the outcome is either ``Ok(value)`` or
``Failed(...)`` carrying the final exception or the last handled result.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from ..config import load_http_settings
from ..errors import categorize_exception
from .models import NO_STATUS, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    """Captured final failure: an exception, or a result the policy kept retrying."""

    exception: BaseException | None = None
    final_handled_result: HttpResponse | None = None
    attempts: int = 0

    @property
    def message(self) -> str | None:
        if self.exception is not None:
            return str(self.exception)
        if self.final_handled_result is not None:
            return self.final_handled_result.error_message or "Retry attempts exhausted"
        return "Retry budget exhausted"


PolicyResult = Union[Ok[T], Failed]


def default_retry_if(config: RetryConfig) -> Callable[[HttpResponse], bool]:
    """Retry transport-level failures (no status) and any configured HTTP statuses."""

    def retry_if(response: HttpResponse) -> bool:
        if response.status_code == NO_STATUS:
            return (response.error_category or "") not in config.retry_never
        return response.status_code in config.retry_statuses

    return retry_if


class RetryPolicy:
    """Retries an action and captures the final outcome instead of raising."""

    def __init__(
        self,
        config: RetryConfig | None = None,
        *,
        retry_if: Callable[[HttpResponse], bool] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or RetryConfig()
        self.retry_if = retry_if or default_retry_if(self.config)
        self._sleep = sleep

    def _should_retry_exception(self, exc: BaseException) -> bool:
        category = categorize_exception(exc).value
        return category in self.config.retry_on and category not in self.config.retry_never

    def execute_and_capture(self, action: Callable[[], T]) -> PolicyResult[T]:
        cfg = self.config
        budget = cfg.retry_budget
        deadline = time.monotonic() + budget if budget and budget > 0 else None

        attempt = 0
        delay = cfg.initial_delay
        last_exception: BaseException | None = None
        last_result: HttpResponse | None = None

        while attempt < max(1, cfg.max_attempts):
            if deadline is not None and time.monotonic() >= deadline:
                break
            try:
                result = action()
            except Exception as exc:  # noqa: BLE001
                last_exception, last_result = exc, None
                if not self._should_retry_exception(exc):
                    logger.debug("Not retrying %s: %s", type(exc).__name__, exc)
                    return Failed(exception=exc, attempts=attempt + 1)
            else:
                if not isinstance(result, HttpResponse) or not self.retry_if(result):
                    if attempt and isinstance(result, HttpResponse):
                        result.meta["retry_count"] = attempt
                    return Ok(result)
                last_exception, last_result = None, result

            attempt += 1
            if attempt >= cfg.max_attempts:
                break
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                delay_to_sleep = min(delay, remaining)
            else:
                delay_to_sleep = delay
            logger.debug("Attempt %d failed, retrying in %.2fs", attempt, delay_to_sleep)
            self._sleep(delay_to_sleep)
            delay *= cfg.backoff_factor

        if last_result is not None:
            last_result.meta.setdefault("retry_count", attempt)
            last_result.meta.setdefault("retry_exhausted", True)
        return Failed(exception=last_exception, final_handled_result=last_result, attempts=attempt)


def build_default_retry_policy() -> RetryPolicy:
    """Create a RetryPolicy from environment-backed HttpSettings."""
    return RetryPolicy(RetryConfig.from_settings(load_http_settings()))


__all__ = ["Failed", "Ok", "PolicyResult", "RetryPolicy", "build_default_retry_policy", "default_retry_if"]
