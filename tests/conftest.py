"""
Pytest configuration and fixtures for postgrest_builder tests.
"""

import json
from typing import Callable

import httpx
import pytest

from postgrest_builder import Client, HTTPXAsyncBackend

REST_URL = "http://localhost:3000"


class RecordingGateway:
    """Fake gateway answering every request with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: object = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.status_code,
            content=json.dumps(self.payload).encode(),
            headers={"Content-Type": "application/json"},
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def make_backend() -> Callable[
    [Callable[[httpx.Request], httpx.Response]], HTTPXAsyncBackend
]:
    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> HTTPXAsyncBackend:
        return HTTPXAsyncBackend(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def client(gateway: RecordingGateway) -> Client:
    """A client whose transport is the recording gateway."""
    return Client(
        REST_URL, backend=HTTPXAsyncBackend(transport=httpx.MockTransport(gateway))
    )
