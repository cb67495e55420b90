"""Shared fixtures for the persist_query test suite."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from persist_query.config.onegraph import OneGraph


SUCCESS_PAYLOAD = {
    "data": {
        "oneGraph": {
            "createPersistedQuery": {"persistedQuery": {"id": "abc123"}}
        }
    }
}


@pytest.fixture
def settings() -> OneGraph:
    """OneGraph settings that never touch the process environment or .env."""
    return OneGraph(
        RAZZLE_ONEGRAPH_APP_ID="app-id",
        OG_DASHBOARD_ACCESS_TOKEN="dash-token",
        _env_file=None,
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it answered."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return respond(request)

        super().__init__(handler)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def onegraph() -> Callable[..., RecordingTransport]:
    """Build a fake OneGraph endpoint answering with a fixed JSON payload."""

    def factory(payload=SUCCESS_PAYLOAD, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(
            lambda request: httpx.Response(status_code, json=payload)
        )

    return factory
