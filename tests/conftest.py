import json
import logging

import pytest

from te_nodes.credentials import Credential
from te_nodes.logger_config import LOGGER_NAME
from te_nodes.te_client import TEClient

BASE = "https://te.example.local/api/v1"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else json.dumps(body))

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:
    # Stands in for requests.Session; routes are keyed by (METHOD, path below BASE).
    def __init__(self, routes=None):
        self.routes = routes if routes is not None else {}
        self.calls = []
        self.verify = True
        self.proxies = {}
        self.auth = None
        self.closed = False

    def request(self, method, url, headers=None, timeout=None, params=None, json=None,
                allow_redirects=True):
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {}),
                           "params": params, "json": json, "timeout": timeout,
                           "allow_redirects": allow_redirects})
        path = url[len(BASE):]
        route = self.routes.get((method, path))
        if route is None:
            return FakeResponse(404, text=f"no route for {method} {path}")
        if isinstance(route, Exception):
            raise route
        return route

    def get(self, url, headers=None, timeout=None, params=None):
        return self.request("GET", url, headers=headers, timeout=timeout, params=params)

    def close(self):
        self.closed = True

    def puts(self):
        return [c for c in self.calls if c["method"] == "PUT"]


TOKEN = FakeResponse(200, {"tokenName": "CSRFToken", "tokenValue": "abc123"})

NODES = [
    {"id": 7, "Name": "srv1", "Description": "old", "Make": "Dell", "Model": "R730", "Version": "1.2"},
    {"id": 8, "Name": "srv2", "Description": None, "Make": "HP", "Model": "DL380", "Version": "9"},
    {"id": 9, "Name": "srv3", "Description": "db", "Make": "Cisco", "Model": None, "Version": "4.1"},
]


@pytest.fixture
def routes():
    return {
        ("GET", "/csrf-token"): TOKEN,
        ("GET", "/nodes"): FakeResponse(200, NODES),
        ("PUT", "/nodes/7"): FakeResponse(200, text=""),
        ("PUT", "/nodes/8"): FakeResponse(200, text=""),
        ("PUT", "/nodes/9"): FakeResponse(200, text=""),
    }


@pytest.fixture
def session(routes):
    return FakeSession(routes)


@pytest.fixture
def client(session):
    return TEClient(BASE, Credential("admin", "s3cret"), session=session, user_agent="te-test/1.0")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("TE_URL", "TE_USERNAME", "TE_PASSWORD", "TE_VERIFY_SSL", "TE_CA_BUNDLE",
                "TE_TIMEOUT", "TE_USER_AGENT", "HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
