"""Pytest configuration and fixtures for tailor-skills tests.

The test environment stays lean: `async def` tests are run with the stdlib's
asyncio through the pytest_pyfunc_call hook below instead of an async plugin,
and HTTP is served by httpx.MockTransport so nothing touches the network.
"""

import asyncio
import inspect
import json
from pathlib import Path
from typing import Callable, Dict, Union

import httpx
import pytest

from tailor_skills import config as ts_config
from tailor_skills import error_logging

RouteValue = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Point config and error log at a temp dir and drop env overrides."""

    config_dir = tmp_path / "config"
    monkeypatch.setattr(ts_config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(ts_config, "CONFIG_FILE", str(config_dir / "skills.cfg"))
    monkeypatch.setattr(error_logging, "LOGS_DIR", str(config_dir / "logs"))
    monkeypatch.setattr(
        error_logging, "ERROR_LOG_FILE", str(config_dir / "logs" / "errors.log")
    )
    for env_var in ts_config.ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield config_dir


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    path = tmp_path / "skills"
    path.mkdir()
    return path


class FakeGitHub:
    """Route table for httpx.MockTransport that records every requested URL."""

    def __init__(self) -> None:
        self.routes: Dict[str, RouteValue] = {}
        self.requested: list[str] = []

    @staticmethod
    def listing_url(owner: str, repo: str, skill: str) -> str:
        return f"https://api.github.com/repos/{owner}/{repo}/contents/skills/{skill}"

    @staticmethod
    def file_entry(name: str, download_url: str) -> dict:
        return {"name": name, "type": "file", "download_url": download_url}

    @staticmethod
    def dir_entry(name: str) -> dict:
        return {"name": name, "type": "dir", "download_url": None}

    def add(self, url: str, value: RouteValue) -> None:
        self.routes[url] = value

    def add_json(self, url: str, data) -> None:
        self.routes[url] = httpx.Response(200, content=json.dumps(data).encode())

    def add_bytes(self, url: str, data: bytes) -> None:
        self.routes[url] = httpx.Response(200, content=data)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        value = self.routes.get(url)
        if value is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(value):
            return value(request)
        return value

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler), follow_redirects=False
        )


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


def pytest_pyfunc_call(pyfuncitem: pytest.Item) -> bool | None:
    """Enable running `async def` tests without external plugins.

    If the test function is a coroutine function, execute it via asyncio.run.
    Return True to signal that the call was handled, allowing pytest to
    proceed without complaining about missing async plugins.
    """
    test_func = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_func):
        kwargs = {
            name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
        }
        asyncio.run(test_func(**kwargs))
        return True
    return None
