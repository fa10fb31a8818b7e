"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def client(tmp_path):
    """TestClient over an app that does not connect to Discord or Notion."""
    from starlette.testclient import TestClient
    from rolesync_lib.main import create_app, Config

    app = create_app(Config(data_dir=str(tmp_path), storage_backend='memory', connect=False))
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
