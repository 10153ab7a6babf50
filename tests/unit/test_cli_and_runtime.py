# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
from dataclasses import dataclass
from datetime import datetime

from restext.cli import main as cli_main
from restext.cli.main import _pretty_print, build_parser
from restext.config import HttpSettings
from restext.http.adapters import StubHttpClient
from restext.http.models import HttpResponse, RetryConfig
from restext.http.retry import RetryPolicy
from restext.params import param_mapping
from restext.runtime import RedirectResolver


def _policy():
    return RetryPolicy(RetryConfig(max_attempts=1), sleep=lambda _: None)


@param_mapping(("flag", "f"), ("page", "p"))
@dataclass
class Query:
    flag: bool = True
    page: int | None = None


def test_build_parser_and_pretty_print(capsys):
    parser = build_parser()
    args = parser.parse_args(["http://example.com", "--json", "--insecure", "--no-follow"])
    assert args.url == "http://example.com"
    assert args.json is True
    assert args.insecure is True
    assert args.no_follow is True

    resp = HttpResponse(
        ok=True,
        status_code=200,
        url="https://example.com/final",
        meta={"redirect_chain": ["https://example.com/a", "https://example.com/final"]},
    )
    _pretty_print(resp)
    output = capsys.readouterr().out
    assert "Final URL: https://example.com/final" in output
    assert "Status: 200" in output
    assert "Redirects (2)" in output

    _pretty_print(HttpResponse(ok=False, error_message="refused", error_category="CONNECTION_ERROR"))
    output = capsys.readouterr().out
    assert "Status: none" in output
    assert "Error: refused (Network connectivity issue)" in output


def test_resolver_resolve_and_fetch_share_client_and_policy():
    client = StubHttpClient(
        {
            "https://a.example/start": HttpResponse(ok=True, status_code=302, headers={"Location": "https://a.example/end"}),
            "https://a.example/end": HttpResponse(ok=True, status_code=200),
        }
    )
    settings = HttpSettings(accept_language="en-GB")
    resolver = RedirectResolver(http_client=client, policy=_policy(), settings=settings)

    resp = resolver.resolve("https://a.example/start", params=Query(page=2))
    assert resp.status_code == 200
    assert resp.url == "https://a.example/end"
    assert client.requests[0].params == [("f", 1), ("p", 2)]
    assert client.requests[0].headers["Accept-Language"] == "en-GB"

    client.requests.clear()
    fetched = resolver.fetch("https://a.example/start", params={"q": "x"}, headers={"X-Trace": "1"})
    assert fetched.status_code == 302
    assert len(client.requests) == 1
    assert client.requests[0].params == [("q", "x")]
    assert client.requests[0].headers["X-Trace"] == "1"


def test_resolver_fetch_normalizes_dict_params():
    client = StubHttpClient({"https://a.example/search": HttpResponse(ok=True, status_code=200)})
    resolver = RedirectResolver(http_client=client, policy=_policy(), settings=HttpSettings())

    resolver.fetch(
        "https://a.example/search",
        params={"active": True, "skip": None, "when": datetime(2024, 3, 1, 9, 30)},
    )

    assert client.requests[0].params == [("active", 1), ("when", "2024-03-01 09:30:00")]


def test_resolver_context_manager_closes_client():
    client = StubHttpClient()
    with RedirectResolver(http_client=client, policy=_policy(), settings=HttpSettings()) as resolver:
        assert resolver.http_client is client
    assert client.closed is True


def test_main_json_output_and_exit_code(monkeypatch, capsys):
    client = StubHttpClient({"https://a.example/": HttpResponse(ok=True, status_code=200)})
    captured = {}

    def fake_factory(settings, *, insecure_skip_verify=None):
        captured["insecure"] = insecure_skip_verify
        return client

    monkeypatch.setattr(cli_main, "create_default_http_client", fake_factory)
    monkeypatch.setattr(cli_main, "setup_logging", lambda level=None: None)
    monkeypatch.setenv("RESTEXT_HTTP_RETRIES", "1")

    assert cli_main.main(["https://a.example/", "--json", "--insecure"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status_code"] == 200
    assert payload["url"] == "https://a.example/"
    assert captured["insecure"] is True
    assert client.closed is True


def test_main_reports_failure_exit_code(monkeypatch, capsys):
    client = StubHttpClient()
    monkeypatch.setattr(cli_main, "create_default_http_client", lambda settings, *, insecure_skip_verify=None: client)
    monkeypatch.setattr(cli_main, "setup_logging", lambda level=None: None)
    monkeypatch.setenv("RESTEXT_HTTP_RETRIES", "1")

    assert cli_main.main(["https://down.example/", "--no-follow"]) == 1
    assert "Status: none" in capsys.readouterr().out
    assert len(client.requests) == 2
