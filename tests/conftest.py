"""Pytest shared fixtures for the Discourse admin client."""
import json
import pathlib
import sys

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from discourse_admin.core import DiscourseClient, DiscourseCredentials, reset_default_client


ENDPOINT = "https://forum.example.com"


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from hitting a live Discourse.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _fail(method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected network access in tests: {method} {url}")

    monkeypatch.setattr(requests, "request", _fail)


@pytest.fixture(autouse=True)
def _clean_default_client():
    reset_default_client()
    yield
    reset_default_client()


# ─────────────────────────────────────────────────────────────────────────────
# Stub transport
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, payload=None, status_code: int = 200, text: str | None = None):
        self.status_code = status_code
        if text is not None:
            self.text = text
        elif payload is None:
            self.text = ""
        else:
            self.text = json.dumps(payload)


class StubSession:
    """Stands in for requests.Session, replaying queued responses or exceptions."""

    def __init__(self):
        self.queue = []
        self.calls = []

    def respond(self, payload=None, status_code: int = 200, text: str | None = None):
        self.queue.append(StubResponse(payload, status_code, text))
        return self

    def fail(self, exc: Exception):
        self.queue.append(exc)
        return self

    def request(self, method, url, params=None, data=None, timeout=None):
        self.calls.append({
            "method": method,
            "url": url,
            "params": params,
            "data": data,
            "timeout": timeout,
        })
        if not self.queue:
            raise AssertionError(f"No stub response queued for {method} {url}")
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture()
def credentials():
    return DiscourseCredentials(ENDPOINT, "system", "admin-key")


@pytest.fixture()
def session():
    return StubSession()


@pytest.fixture()
def discourse(credentials, session):
    """DiscourseClient wired to the stub session."""
    return DiscourseClient(credentials, session=session)


@pytest.fixture()
def unreachable(credentials):
    """DiscourseClient whose every request fails with a connection error."""
    stub = StubSession()
    for _ in range(20):
        stub.fail(requests.ConnectionError("Failed to establish a new connection: [Errno 111] Connection refused"))
    return DiscourseClient(credentials, session=stub)


@pytest.fixture()
def discourse_env(monkeypatch):
    """Process environment for load_settings()."""
    monkeypatch.setenv("DISCOURSE_ENDPOINT", ENDPOINT + "/")
    monkeypatch.setenv("DISCOURSE_USERNAME", "system")
    monkeypatch.setenv("DISCOURSE_API_KEY", "env-key")
    monkeypatch.delenv("DISCOURSE_REQUEST_TIMEOUT", raising=False)
    monkeypatch.delenv("DISCOURSE_UNKNOWN_FIELDS", raising=False)
