"""Shared test fixtures for the scheduler extender client."""

import os

import httpx
import pytest

from scheduler_extender.config import ExtenderConfig
from scheduler_extender.extender import HTTPExtender
from scheduler_extender.types import CandidateList, PlacementRequest


class ExtenderStub:
    """Mock extender service answering requests from a path -> response table.

    A response may be a JSON-able value (sent with status 200), an
    ``httpx.Response``, or an exception to raise from the transport.
    """

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses[request.url.path]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def _clear_extender_env(monkeypatch):
    """Keep EXTENDER_* variables from the host environment out of configs."""
    for key in list(os.environ):
        if key.upper().startswith("EXTENDER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def pod():
    """Return a simple pod to place."""
    return PlacementRequest(
        metadata={"name": "web-0", "namespace": "default"},
        spec={"containers": [{"name": "web", "image": "nginx:1.25"}]},
    )


@pytest.fixture
def nodes():
    """Return candidate nodes A, B and C."""
    return CandidateList.from_names("A", "B", "C")


@pytest.fixture
def make_extender():
    """Build an HTTPExtender wired to an ExtenderStub.

    Returns ``(extender, stub)``; extenders are closed after the test.
    """
    created = []

    def factory(responses=None, api_version="v1", **config_fields):
        config_fields.setdefault("url_prefix", "http://ext")
        stub = ExtenderStub(responses or {})
        extender = HTTPExtender(
            ExtenderConfig(**config_fields), api_version, transport=stub.transport
        )
        created.append(extender)
        return extender, stub

    yield factory

    for extender in created:
        extender.close()
