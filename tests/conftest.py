"""Shared fixtures: an in-memory preference store and a fake Jellyfin server."""
from __future__ import annotations

import json
from urllib.parse import urlparse

import pytest

from Jellyfin_Source.core.config_loader import _get_default_config
from Jellyfin_Source.core.preferences import PreferenceStore
from Jellyfin_Source.sources.jellyfin import JellyfinSource


SERVER_URL = "http://jf.local:8096"


class DummyResp:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeServer:
    """Routes (method, path) to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, status=200, payload=None, text=None, handler=None, error=None):
        if handler is not None:
            self.routes[(method, path)] = handler
        elif error is not None:
            self.routes[(method, path)] = error
        else:
            self.routes[(method, path)] = DummyResp(status, payload, text)

    def _handle(self, method, url, params=None, headers=None, **kwargs):
        path = urlparse(url).path
        self.calls.append({
            "method": method,
            "path": path,
            "params": dict(params or {}),
            "headers": dict(headers or {}),
        })
        route = self.routes.get((method, path))
        if route is None:
            return DummyResp(404, text="Not Found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(dict(params or {}))
        return route

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)

    def head(self, url, **kwargs):
        return self._handle("HEAD", url, **kwargs)

    def paths(self, method=None):
        return [c["path"] for c in self.calls if method is None or c["method"] == method]


@pytest.fixture
def config():
    config = _get_default_config()
    config["preferences"]["directory"] = None
    return config


@pytest.fixture
def store():
    return PreferenceStore()


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def source(config, store, server):
    src = JellyfinSource(config, store=store)
    src.request._get = server.get
    src.request._head = server.head
    return src


@pytest.fixture
def logged_in(store):
    store.edit(server_url=SERVER_URL, api_key="KEY", user_id="u1")
    return store


@pytest.fixture
def resp():
    """Factory for canned responses returned from route handlers."""
    return DummyResp
