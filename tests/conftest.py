"""
Pytest configuration and fixtures for DEX tests.
"""

import os
import pytest

# Set test environment before importing dex modules
os.environ["DEX_ENV"] = "development"
os.environ["GENERATION_LATENCY_SECONDS"] = "0"
os.environ.pop("GEMINI_API_KEY", None)

from dex.config import get_settings, settings
from dex.content.catalog import default_catalog, sample_team
from dex.core.models import Role, RoleCategory, UserProfile
from dex.core.notifications import RecordingNotificationSink
from dex.observability.session_logger import SessionLogger


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def team():
    return sample_team()


@pytest.fixture
def pm_user():
    """Desk-based product manager on Day 1."""
    return UserProfile(
        id="user-pm",
        name="Alex Rivera",
        role=Role.EMPLOYEE,
        job_title="Product Manager",
        department="Product",
        role_category=RoleCategory.DESK,
        manager="Jordan Lee",
        onboarding_day=1,
    )


@pytest.fixture
def manager_user():
    return UserProfile(
        id="user-mgr",
        name="Jordan Lee",
        role=Role.MANAGER,
        job_title="Engineering Manager",
        role_category=RoleCategory.LEADERSHIP,
    )


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def journal():
    """Disabled journal; every call is a no-op."""
    return SessionLogger(enabled=False)


@pytest.fixture
def fresh_settings(monkeypatch, tmp_path):
    """Settings reloaded from the environment, with profiles under tmp_path."""
    monkeypatch.setenv("PROFILE_STORE_DIR", str(tmp_path / "profiles"))
    get_settings.cache_clear()
    settings._instance = None
    yield get_settings()
    get_settings.cache_clear()
    settings._instance = None
