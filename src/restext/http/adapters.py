# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory HttpClient implementations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .client import HttpClient
from .models import NO_STATUS, HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Each URL maps to a queue of responses; the last queued response is repeated once
    the queue is drained. Returned responses are copies stamped with the request and,
    when unset and ``fill_url`` is on, the request URL.
    """

    def __init__(
        self,
        responses: dict[str, HttpResponse | Iterable[HttpResponse]] | None = None,
        *,
        fill_url: bool = True,
    ):
        self.fill_url = fill_url
        self._responses: dict[str, list[HttpResponse]] = {}
        self.requests: list[HttpRequest] = []
        self.cookie_resets = 0
        self.closed = False
        for url, response in (responses or {}).items():
            self.add(url, response)

    def add(self, url: str, response: HttpResponse | Iterable[HttpResponse]) -> None:
        if isinstance(response, HttpResponse):
            self._responses[url] = [response]
        else:
            self._responses[url] = list(response)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self._responses.get(request.url)
        if not queue:
            return HttpResponse(
                ok=False,
                status_code=NO_STATUS,
                request=request,
                error_message="No stubbed response configured",
            )
        template = queue.pop(0) if len(queue) > 1 else queue[0]
        return replace(
            template,
            headers=dict(template.headers),
            meta=dict(template.meta),
            url=template.url or (request.url if self.fill_url else None),
            request=request,
        )

    def reset_cookies(self) -> None:
        self.cookie_resets += 1

    def close(self) -> None:
        self.closed = True
