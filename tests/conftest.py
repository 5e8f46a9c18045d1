import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from flask import Flask  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Generation overrides from a developer .env must not leak into tests."""
    for key in list(os.environ):
        if key.startswith("DUNGEONGEN_"):
            monkeypatch.delenv(key, raising=False)
    # Keep test output quiet unless a test opts in
    monkeypatch.setenv("DUNGEONGEN_LOG_LEVEL", "warn")
    yield


@pytest.fixture()
def flask_app():
    app = Flask("dungeongen-tests")
    app.config.update({"TESTING": True})
    return app
