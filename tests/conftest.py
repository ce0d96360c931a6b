import os

os.environ.setdefault("REPLICATE_API_TOKEN", "r8_test_token")

import pytest
from fastapi.testclient import TestClient

from main import app
from app.services.Generate_Image import generate_image_route


class FakeReplicateClient:
    """Stands in for replicate.Client; records inputs and returns a canned output"""

    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.calls = []

    async def async_run(self, model, input=None):
        self.calls.append((model, input))
        if self.error is not None:
            raise self.error
        return self.output


class FakeResponse:
    def __init__(self, status_code=200, content=b"", headers=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self.content = content
        self.headers = headers or {}
        self.text = text


async def event_stream(*events):
    for event in events:
        yield event


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_replicate(monkeypatch):
    fake = FakeReplicateClient()
    monkeypatch.setattr(generate_image_route.generate_image_service, "client", fake)
    return fake
