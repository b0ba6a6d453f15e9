"""Shared test fixtures for strapi-cache.

Provides an in-process fake Strapi server (served through
:class:`httpx.MockTransport`), isolated config/cache directories, a
ready-to-use façade, and output-state management. These fixtures are
discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from strapi_cache.models import CacheConfig, StrapiConfig
from strapi_cache.output import reset_output
from strapi_cache.strapi import Strapi


BASE_URL = "https://cms.example.com"


class FakeStrapi:
    """Route table answering GET requests with canned JSON bodies.

    Routes are matched on the raw path including the query string first
    (``/articles?_sort=id:DESC&_limit=20&_start=0``), then on the bare
    path (``/articles``). Unmatched requests get a 404 with a null body
    so a wrong URL shows up as an assertion on :attr:`requests`.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Exception | None = None

    def add(self, path: str, body: Any, status_code: int = 200) -> None:
        self.routes[path] = (status_code, body)

    @property
    def paths(self) -> list[str]:
        """Raw paths (with query) of every request received, in order."""
        return [request.url.raw_path.decode() for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        raw = request.url.raw_path.decode()
        status_code, body = self.routes.get(raw) or self.routes.get(
            request.url.path, (404, None)
        )
        return httpx.Response(
            status_code,
            content=json.dumps(body).encode(),
            headers={"content-type": "application/json"},
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams, so a fresh manager is
    needed for every test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Façade fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_strapi() -> FakeStrapi:
    return FakeStrapi()


@pytest.fixture
def strapi_config(tmp_path: Path) -> StrapiConfig:
    """Config pointing at the fake server with a cache under tmp_path."""
    return StrapiConfig(
        url=BASE_URL,
        cache_time=300,
        cache=CacheConfig(enabled=True, directory=str(tmp_path / "cache")),
    )


@pytest.fixture
def strapi(strapi_config: StrapiConfig, fake_strapi: FakeStrapi) -> Strapi:
    """A façade wired to :class:`FakeStrapi`."""
    with Strapi(strapi_config, transport=fake_strapi.transport()) as s:
        yield s


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all STRAPI_* environment variables and changes the
    working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("strapi_cache.config._is_xdg_platform", lambda: True)

    for var in ["STRAPI_URL", "STRAPI_CACHE_TIME", "STRAPI_TOKEN"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
