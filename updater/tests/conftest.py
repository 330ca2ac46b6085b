"""
Shared fixtures: isolated environment and a stubbed CurseForge HTTP endpoint.
"""

import io
import json
import urllib.error

import pytest

ENV_VARS = [
    "CURSEFORGE_API_KEY",
    "CURSEFORGE_API_BASE",
    "CURSEFORGE_PROJECT_ID",
    "CURSEFORGE_PAGE_SIZE",
    "CURSEFORGE_TIMEOUT",
    "LAUNCH_FILE",
    "SELECTION_POLICY",
    "LOG_LEVEL",
    "LOG_JSON",
    "LOG_FILE",
]

LAUNCH_SH = """#!/usr/bin/env bash
set -euo pipefail

SERVER_VERSION="0.9.0"
SERVER_FILE_ID=50

echo "Starting ATMons ${SERVER_VERSION} (${SERVER_FILE_ID})"
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment variables out of Settings()."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def launch_file(tmp_path):
    path = tmp_path / "launch.sh"
    path.write_text(LAUNCH_SH, encoding="utf-8")
    return path


class FakeResponse:
    def __init__(self, payload):
        self._raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")

    def read(self):
        return self._raw

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeCurseForge:
    """
    Stand-in for urllib.request.urlopen.

    Routes are matched by URL path suffix (query string ignored). A route value
    is a JSON-able payload, raw bytes, or an (status, body) tuple for errors.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path_suffix, value):
        self.routes[path_suffix] = value

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        url = req.full_url
        path = url.split("?", 1)[0]
        for suffix, value in self.routes.items():
            if path.endswith(suffix):
                if isinstance(value, tuple):
                    status, body = value
                    raise urllib.error.HTTPError(url, status, "error", {}, io.BytesIO(body.encode("utf-8")))
                return FakeResponse(value)
        raise urllib.error.URLError(f"no route for {url}")


@pytest.fixture
def fake_api(monkeypatch):
    api = FakeCurseForge()
    monkeypatch.setattr("urllib.request.urlopen", api)
    return api
