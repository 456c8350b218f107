"""HTTP GET with bounded redirect following.

Redirects are followed by hand rather than by httpx so the hop limit and
the "too many redirects" failure are ours. Every request carries the same
identifying User-Agent, and GitHub API requests carry the configured token.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from tailor_skills import __version__
from tailor_skills.config import (
    get_api_base_url,
    get_github_token,
    get_http_timeout,
    get_max_redirects,
)
from tailor_skills.errors import HttpStatusError, NetworkError, TooManyRedirectsError

logger = logging.getLogger(__name__)

USER_AGENT = f"tailor-skills-cli/{__version__}"
REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


def open_client() -> httpx.AsyncClient:
    """Build the client shared by every request of one CLI command."""

    return httpx.AsyncClient(
        timeout=get_http_timeout(),
        headers={"User-Agent": USER_AGENT},
        follow_redirects=False,
    )


def _request_headers(url: str) -> dict[str, str]:
    headers = {"User-Agent": USER_AGENT}
    token = get_github_token()
    if token and httpx.URL(url).host == httpx.URL(get_api_base_url()).host:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def _get_following_redirects(
    client: httpx.AsyncClient, url: str, max_redirects: int
) -> bytes:
    current = url
    for hop in range(max_redirects + 1):
        try:
            response = await client.get(current, headers=_request_headers(current))
        except httpx.TransportError as e:
            raise NetworkError(f"Request to {current} failed: {e}") from e

        location = response.headers.get("location")
        if response.status_code in REDIRECT_STATUS_CODES and location:
            target = str(response.url.join(location))
            logger.debug(
                f"Redirect {response.status_code} (hop {hop + 1}): {current} -> {target}"
            )
            current = target
            continue

        if response.status_code != 200:
            raise HttpStatusError(response.status_code, current)

        return response.content

    raise TooManyRedirectsError(url, max_redirects)


async def fetch(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    max_redirects: Optional[int] = None,
) -> bytes:
    """Fetch ``url`` and return the full response body.

    Args:
        url: Absolute URL to GET.
        client: Client to reuse. When omitted a client is opened for this
            call only.
        max_redirects: Redirect hops allowed before giving up. Defaults to
            the configured ``max_redirects``.

    Raises:
        NetworkError: On connection, read or timeout failures.
        HttpStatusError: On any status other than 200 or a redirect with a
            Location header.
        TooManyRedirectsError: If the redirect chain exceeds the limit.
    """

    limit = get_max_redirects() if max_redirects is None else max_redirects

    if client is not None:
        return await _get_following_redirects(client, url, limit)

    async with open_client() as own_client:
        return await _get_following_redirects(own_client, url, limit)
