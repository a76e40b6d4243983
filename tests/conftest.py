"""
Shared test fixtures for trello-cli tests.
Patches the config module so no test reads real credentials or makes API calls.
"""

import os
import sys

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Ensure every test starts with a clean config state.
    Prevents tests from reading the real credentials or sharing runtime flags."""
    from trello_cli import config

    monkeypatch.delenv("TRELLO_API_KEY", raising=False)
    monkeypatch.delenv("TRELLO_API_TOKEN", raising=False)
    monkeypatch.setenv("TRELLO_CONFIG", str(tmp_path / "config.toml"))
    monkeypatch.setattr(config, "RUNTIME_DRY_RUN", False)
    monkeypatch.setattr(config, "RUNTIME_QUIET", False)
    monkeypatch.setattr(config, "RUNTIME_VERBOSE", False)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
