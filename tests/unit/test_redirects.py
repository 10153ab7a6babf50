# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from restext.config import HttpSettings
from restext.http.adapters import StubHttpClient
from restext.http.httpx_client import HttpxClient
from restext.http.models import NO_STATUS, HttpRequest, HttpResponse, RetryConfig
from restext.http.redirects import URL_PATTERN, execute_with_redirects, get_url_from_response
from restext.http.retry import RetryPolicy


@pytest.fixture
def policy():
    return RetryPolicy(RetryConfig(max_attempts=1), sleep=lambda _: None)


def _urls(client):
    return [r.url for r in client.requests]


def test_location_header_wins_over_query_value():
    resp = HttpResponse(
        ok=True,
        status_code=302,
        url="https://a.example/?next=https://b.example/x",
        headers={"Location": "https://c.example/y?z=1"},
    )
    assert get_url_from_response(resp) == "https://c.example/y?z=1"


def test_lowercased_location_header_is_found():
    resp = HttpResponse(ok=True, status_code=301, url="https://a.example/", headers={"location": "/moved"})
    assert get_url_from_response(resp) == "/moved"


@pytest.mark.parametrize(
    "url",
    [
        "https://a.example/login?continue=https://example.com/path?x=1",
        "https://a.example/login?continue=https%3A%2F%2Fexample.com%2Fpath%3Fx%3D1",
        "https://a.example/login?lang=en&continue=https%3A%2F%2Fexample.com%2Fpath%3Fx%3D1",
    ],
)
def test_url_shaped_query_value_is_extracted(url):
    resp = HttpResponse(ok=True, status_code=200, url=url)
    assert get_url_from_response(resp) == "https://example.com/path?x=1"


def test_first_matching_query_value_in_order():
    resp = HttpResponse(
        ok=True,
        status_code=200,
        url="https://a.example/?a=plain&b=www.first.example/p&c=https://second.example/",
    )
    assert get_url_from_response(resp) == "www.first.example/p"


def test_empty_location_falls_back_to_query():
    resp = HttpResponse(
        ok=True,
        status_code=200,
        url="https://a.example/?u=http://b.example/next",
        headers={"Location": ""},
    )
    assert get_url_from_response(resp) == "http://b.example/next"


def test_no_location_candidates():
    assert get_url_from_response(None) is None
    assert get_url_from_response(HttpResponse(ok=True, headers={"Location": "/x"})) is None
    assert get_url_from_response(HttpResponse(ok=True, url="https://a.example/?q=hello&n=1")) is None
    assert get_url_from_response(HttpResponse(ok=True, url="https://a.example/path")) is None


def test_url_pattern_shapes():
    assert URL_PATTERN.search("see https://ex.example/a for more").group(0) == "https://ex.example/a"
    assert URL_PATTERN.search("www.ab.io/x").group(0) == "www.ab.io/x"
    assert URL_PATTERN.search("ftp://ex.example/a") is None
    assert URL_PATTERN.search("just text") is None


def test_follows_header_and_query_redirects_to_final(policy):
    client = StubHttpClient(
        {
            "https://a.example/start": HttpResponse(ok=True, status_code=302, text="x" * 100, headers={"location": "/step"}),
            "https://a.example/step": HttpResponse(
                ok=True,
                status_code=200,
                url="https://a.example/done?continue=https://a.example/final",
            ),
            "https://a.example/final": HttpResponse(ok=True, status_code=200, text="final body"),
        }
    )
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/start", method="POST"), policy)

    assert resp.status_code == 200
    assert resp.url == "https://a.example/final"
    assert resp.text == ""
    assert resp.meta["redirect_chain"] == ["https://a.example/step", "https://a.example/final"]
    assert _urls(client) == [
        "https://a.example/start",
        "https://a.example/step",
        "https://a.example/final",
        "https://a.example/final",
    ]
    assert client.requests[0].method == "POST"
    assert all(r.method == "GET" for r in client.requests[1:])
    assert all(r.headers["Connection"] == "keep-alive" for r in client.requests)
    assert client.cookie_resets == 4


def test_repeated_location_stops_the_loop(policy):
    loop = HttpResponse(ok=True, status_code=302, headers={"Location": "https://a.example/loop"})
    client = StubHttpClient({"https://a.example/loop": loop})
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/loop"), policy, ignore_next_redirects=True)

    assert resp.status_code == 302
    assert resp.meta["redirect_chain"] == ["https://a.example/loop"]
    assert len(client.requests) == 2


def test_repeated_location_terminates_with_nested_resolution(policy):
    loop = HttpResponse(ok=True, status_code=302, headers={"Location": "https://a.example/loop"})
    client = StubHttpClient({"https://a.example/loop": loop})
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/loop"), policy)

    assert resp.status_code == 302
    assert resp.url == "https://a.example/loop"
    assert len(client.requests) == 4


def test_same_host_nested_resolution_returns_nested_result(policy):
    client = StubHttpClient(
        {
            "https://a.example/page": [
                HttpResponse(ok=True, status_code=200, url="https://a.example/page"),
                HttpResponse(ok=True, status_code=201, url="https://a.example/landing"),
            ]
        }
    )
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/page"), policy)

    assert resp.status_code == 201
    assert resp.url == "https://a.example/landing"
    assert len(client.requests) == 2


def test_cross_host_nested_resolution_keeps_original_response(policy):
    client = StubHttpClient(
        {
            "https://a.example/page": [
                HttpResponse(ok=True, status_code=200, url="https://a.example/page"),
                HttpResponse(ok=True, status_code=201, url="https://other.example/elsewhere"),
            ]
        }
    )
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/page"), policy)

    assert resp.status_code == 200
    assert resp.url == "https://a.example/page"
    assert len(client.requests) == 2


def test_ignore_next_redirects_returns_first_terminal_response(policy):
    client = StubHttpClient({"https://a.example/page": HttpResponse(ok=True, status_code=200)})
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/page"), policy, True)

    assert resp.status_code == 200
    assert resp.meta["redirect_chain"] == []
    assert len(client.requests) == 1


def test_unparseable_location_is_not_a_redirect(policy):
    client = StubHttpClient(
        {"https://a.example/bad": HttpResponse(ok=True, status_code=302, headers={"Location": "http://[::1"})}
    )
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/bad"), policy, True)

    assert resp.status_code == 302
    assert len(client.requests) == 1


def test_transport_failure_ends_resolution(policy):
    client = StubHttpClient()
    resp = execute_with_redirects(client, HttpRequest(url="https://down.example/"), policy)

    assert resp.ok is False
    assert resp.status_code == NO_STATUS
    assert resp.url is None
    assert len(client.requests) == 2
    assert client.requests[1].headers["X-Requested-With"] == "XMLHttpRequest"


def test_response_without_resolved_uri_is_final(policy):
    client = StubHttpClient(
        {"https://a.example/x": HttpResponse(ok=True, status_code=302, headers={"Location": "/y"})},
        fill_url=False,
    )
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/x"), policy)

    assert resp.status_code == 302
    assert len(client.requests) == 1


class CappedStubHttpClient(StubHttpClient):
    def __init__(self, responses, limit):
        super().__init__(responses)
        self.limit = limit

    def request(self, request):
        if len(self.requests) >= self.limit:
            self.requests.append(request)
            raise RuntimeError("request cap reached")
        return super().request(request)


def test_two_location_cycle_is_not_detected(policy):
    client = CappedStubHttpClient(
        {
            "https://a.example/a": HttpResponse(ok=True, status_code=302, headers={"Location": "https://a.example/b"}),
            "https://a.example/b": HttpResponse(ok=True, status_code=302, headers={"Location": "https://a.example/a"}),
        },
        limit=10,
    )
    resp = execute_with_redirects(client, HttpRequest(url="https://a.example/a"), policy)

    assert _urls(client)[:10] == ["https://a.example/a", "https://a.example/b"] * 5
    assert len(client.requests) == 12
    assert resp.ok is False
    assert resp.status_code == NO_STATUS
    assert resp.url is None


def test_client_without_redirect_following_is_driven_by_location_header(policy):
    hits = []

    def handler(request):
        hits.append(str(request.url))
        if request.url.path == "/start":
            return httpx.Response(302, headers={"Location": "/end"})
        return httpx.Response(200, text="done")

    transport_client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=False)
    client = HttpxClient(HttpSettings(allow_redirects=False), client=transport_client)
    resp = execute_with_redirects(client, HttpRequest(url="http://h/start"), policy)

    assert resp.status_code == 200
    assert resp.url == "http://h/end"
    assert resp.meta["redirect_chain"] == ["http://h/end"]
    assert hits == ["http://h/start", "http://h/end", "http://h/end"]
