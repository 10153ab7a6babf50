# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from .client import HttpClient
from .headers import merge_headers, normalize_headers
from .models import NO_STATUS, HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper."""

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        *,
        insecure_skip_verify: bool | None = None,
    ):
        self.settings = settings or load_http_settings()
        if insecure_skip_verify is None:
            insecure_skip_verify = self.settings.insecure_skip_verify
        self.insecure_skip_verify = insecure_skip_verify
        if insecure_skip_verify:
            logger.warning("TLS certificate verification is disabled for this client")
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=not insecure_skip_verify,
        )

    def reset_cookies(self) -> None:
        self._client.cookies = httpx.Cookies()

    def _encode(self, request: HttpRequest) -> tuple[str, dict[str, str], bytes | str | None]:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        url = request.url
        body = request.body
        params = [(name, str(value)) for name, value in request.params]
        if params:
            if request.params_in_query:
                target = httpx.URL(url)
                merged = httpx.QueryParams(list(target.params.multi_items()) + params)
                url = str(target.copy_with(params=merged))
            else:
                body = urlencode(params)
                headers = merge_headers(headers, {"Content-Type": "application/x-www-form-urlencoded"})
        return url, headers, body

    def request(self, request: HttpRequest) -> HttpResponse:
        try:
            url, headers, body = self._encode(request)
            max_body_bytes = self.settings.max_body_bytes
            if max_body_bytes <= 0:
                max_body_bytes = 16 * 1024 * 1024

            timeout = request.timeout if request.timeout is not None else self.settings.timeout
            follow_redirects = request.allow_redirects
            if follow_redirects is None:
                follow_redirects = self.settings.allow_redirects

            with self._client.stream(
                request.method,
                url,
                headers=headers,
                content=body,
                timeout=timeout,
                follow_redirects=follow_redirects,
            ) as resp:
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(content)
                    if remaining <= 0:
                        truncated = True
                        break
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=normalize_headers(resp.headers),
                text=text,
                content=bytes(content),
                url=str(resp.url),
                request=request,
                meta={
                    "body_truncated": truncated,
                    "body_bytes_read": len(content),
                    "body_bytes_limit": max_body_bytes,
                },
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                ok=False,
                status_code=NO_STATUS,
                request=request,
                error=exc,
                error_message=str(exc),
                error_type=type(exc).__name__,
                error_category=categorize_exception(exc).value,
            )

    def close(self) -> None:
        self._client.close()
