"""Shared fixtures for the datasource tests."""

from datetime import datetime, timezone

import pytest

from wow_renovate_datasource.version_types import WOW_VERSION_TYPES


@pytest.fixture
def catalog():
    return WOW_VERSION_TYPES


@pytest.fixture
def now():
    """Fixed run time so timestamps in documents are predictable."""
    return datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with no CurseForge settings in the environment."""
    monkeypatch.chdir(tmp_path)
    for name in ("CURSEFORGE_API_KEY", "CURSEFORGE_API_URL", "CURSEFORGE_UPLOAD_API_URL"):
        # set first so values loaded from .env files are undone after the test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path
