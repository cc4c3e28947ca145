"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from hogman.core.api_client import PostHogClient
from hogman.core.credentials import CredentialStore

HOST = "https://posthog.test"


class FakePostHog:
    """In-memory PostHog API served through ``httpx.MockTransport``.

    Routes are keyed by method and full URL (query string included); any
    unknown URL answers 404.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path_or_url: str,
        json_body: Any = None,
        status: int = 200,
        method: str = "GET",
        text: Optional[str] = None,
    ) -> None:
        url = path_or_url if path_or_url.startswith("http") else HOST + path_or_url
        if text is not None:
            response = httpx.Response(status, text=text)
        else:
            response = httpx.Response(status, json=json_body)
        self.routes[(method, str(httpx.URL(url)))] = response

    def page(self, path_or_url: str, results: list, next_url: Optional[str] = None) -> None:
        """Register one page of a paginated list endpoint."""
        self.add(
            path_or_url,
            {"count": len(results), "next": next_url, "previous": None, "results": results},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, str(request.url)))
        if response is None:
            return httpx.Response(404, json={"detail": "Not found."})
        return httpx.Response(
            response.status_code, content=response.content, headers=response.headers
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """No PostHog credentials from the real environment; cwd is a scratch dir."""
    for name in ("POSTHOG_API_KEY", "POSTHOG_HOST", "POSTHOG_PROJECT_ID", "HOGMAN_CONFIG_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def store_path(tmp_path) -> Path:
    return tmp_path / "hogman" / "config.json"


@pytest.fixture
def store(store_path) -> CredentialStore:
    return CredentialStore(store_path)


@pytest.fixture
def fake() -> FakePostHog:
    return FakePostHog()


@pytest.fixture
def client(fake):
    """PostHog client wired to the fake server."""
    with PostHogClient("phx_test", HOST, transport=fake.transport) as c:
        yield c
