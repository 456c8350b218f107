"""Tests for the redirect-following HTTP fetcher."""

import httpx
import pytest

import tailor_skills.http_fetcher as fetcher
from tailor_skills.errors import (
    FetchError,
    HttpStatusError,
    NetworkError,
    TooManyRedirectsError,
)

RAW = "https://raw.githubusercontent.com/Acme/tools/main/skills/review/SKILL.md"


async def test_success_returns_body(github):
    github.add_bytes(RAW, b"# Review skill\n")

    async with github.client() as client:
        body = await fetcher.fetch(RAW, client=client)

    assert body == b"# Review skill\n"


@pytest.mark.parametrize("status", [301, 302])
async def test_redirect_behaves_like_direct_fetch(github, status):
    start = "https://github.com/Acme/tools/raw/main/skills/review/SKILL.md"
    github.add(start, httpx.Response(status, headers={"Location": RAW}))
    github.add_bytes(RAW, b"payload")

    async with github.client() as client:
        redirected = await fetcher.fetch(start, client=client)
        direct = await fetcher.fetch(RAW, client=client)

    assert redirected == direct == b"payload"
    assert github.requested == [start, RAW, RAW]


async def test_multi_hop_and_relative_location(github):
    github.add("https://a.test/one", httpx.Response(307, headers={"Location": "/two"}))
    github.add(
        "https://a.test/two", httpx.Response(308, headers={"Location": "https://b.test/three"})
    )
    github.add_bytes("https://b.test/three", b"done")

    async with github.client() as client:
        assert await fetcher.fetch("https://a.test/one", client=client) == b"done"

    assert github.requested == [
        "https://a.test/one",
        "https://a.test/two",
        "https://b.test/three",
    ]


async def test_404_raises_status_error(github):
    async with github.client() as client:
        with pytest.raises(HttpStatusError) as exc_info:
            await fetcher.fetch("https://a.test/missing", client=client)

    assert exc_info.value.status_code == 404
    assert "404" in str(exc_info.value)
    assert "https://a.test/missing" in str(exc_info.value)


async def test_redirect_without_location_is_a_status_error(github):
    github.add("https://a.test/odd", httpx.Response(302))

    async with github.client() as client:
        with pytest.raises(HttpStatusError, match="302"):
            await fetcher.fetch("https://a.test/odd", client=client)


async def test_non_200_success_codes_are_rejected(github):
    github.add("https://a.test/empty", httpx.Response(204))

    async with github.client() as client:
        with pytest.raises(HttpStatusError, match="204"):
            await fetcher.fetch("https://a.test/empty", client=client)


async def test_redirect_cycle_stops_at_limit(github):
    github.add("https://a.test/loop", httpx.Response(302, headers={"Location": "/loop"}))

    async with github.client() as client:
        with pytest.raises(TooManyRedirectsError) as exc_info:
            await fetcher.fetch("https://a.test/loop", client=client, max_redirects=3)

    assert exc_info.value.max_redirects == 3
    assert isinstance(exc_info.value, FetchError)
    # the original request plus three followed hops
    assert len(github.requested) == 4


async def test_redirect_limit_comes_from_config(github, monkeypatch):
    monkeypatch.setenv("TAILOR_SKILLS_MAX_REDIRECTS", "1")
    github.add("https://a.test/1", httpx.Response(302, headers={"Location": "/2"}))
    github.add("https://a.test/2", httpx.Response(302, headers={"Location": "/3"}))
    github.add_bytes("https://a.test/3", b"too far")

    async with github.client() as client:
        with pytest.raises(TooManyRedirectsError):
            await fetcher.fetch("https://a.test/1", client=client)


async def test_transport_failure_raises_network_error(github):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    github.add("https://a.test/down", refuse)

    async with github.client() as client:
        with pytest.raises(NetworkError) as exc_info:
            await fetcher.fetch("https://a.test/down", client=client)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


async def test_requests_carry_user_agent(github):
    seen = {}

    def capture(request):
        seen["ua"] = request.headers.get("user-agent")
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, content=b"ok")

    github.add("https://a.test/ua", capture)

    async with github.client() as client:
        await fetcher.fetch("https://a.test/ua", client=client)

    assert seen["ua"] == fetcher.USER_AGENT
    assert seen["auth"] is None


async def test_github_token_only_sent_to_api_host(github, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    auth = {}

    def capture(request):
        auth[str(request.url)] = request.headers.get("authorization")
        return httpx.Response(200, content=b"[]")

    api = "https://api.github.com/repos/Acme/tools/contents/skills/review"
    github.add(api, capture)
    github.add(RAW, capture)

    async with github.client() as client:
        await fetcher.fetch(api, client=client)
        await fetcher.fetch(RAW, client=client)

    assert auth[api] == "Bearer ghp_test"
    assert auth[RAW] is None


async def test_fetch_without_client_opens_its_own(github, monkeypatch):
    github.add_bytes("https://a.test/own", b"mine")
    monkeypatch.setattr(fetcher, "open_client", github.client)

    assert await fetcher.fetch("https://a.test/own") == b"mine"


async def test_open_client_does_not_follow_redirects():
    async with fetcher.open_client() as client:
        assert client.follow_redirects is False
        assert client.headers["user-agent"] == fetcher.USER_AGENT
