from __future__ import annotations

import copy
import os
from datetime import datetime, timezone
from pathlib import Path

# No daily log files from test runs
os.environ.setdefault("JOBMATE_LOG_FILE", "0")

import pytest

from jobmate.config import CONFIG_DIR, DEFAULT_SETTINGS
from jobmate.models import (
    AssistantPreferences,
    Coordinates,
    JobRecord,
    SpecialistProfile,
    TimeSlot,
    Urgency,
    UserSkill,
    UserState,
)
from jobmate.store import InMemoryStore

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)
SAMPLE_FIXTURE: Path = CONFIG_DIR / "sample_marketplace.yaml"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def settings() -> dict:
    return copy.deepcopy(DEFAULT_SETTINGS)


@pytest.fixture
def specialist() -> SpecialistProfile:
    return SpecialistProfile(
        id="sp-1",
        name="Dana Reyes",
        user_id="u-1",
        skills=["React", "JavaScript", "CSS"],
        location=Coordinates(40.7580, -73.9855),
        service_radius_km=30,
        hourly_rate_min=50,
        hourly_rate_max=90,
        availability={"monday": ["morning"], "wednesday": ["afternoon"]},
        rating=4.5,
        completed_jobs=20,
        response_time_minutes=30,
    )


@pytest.fixture
def job() -> JobRecord:
    return JobRecord(
        id="job-1",
        title="React storefront",
        category="Web Development",
        location=Coordinates(40.7128, -74.0060),
        budget_min=40,
        budget_max=80,
        urgency=Urgency.HIGH,
        required_skills=["react", "css"],
        requested_slots=[TimeSlot("monday", "morning")],
    )


@pytest.fixture
def customer() -> UserState:
    return UserState(id="u-2", role="CUSTOMER", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def specialist_user() -> UserState:
    return UserState(
        id="u-1",
        role="SPECIALIST",
        bio="Front-end developer",
        skills=[UserSkill("React", 3), UserSkill("CSS")],
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_store():
    """Factory for an InMemoryStore with every user opted in at the given level."""

    def _make(*users: UserState, level: int = 3, **kwargs) -> InMemoryStore:
        store = InMemoryStore(users={u.id: u for u in users}, **kwargs)
        for u in users:
            store.preferences.setdefault(u.id, AssistantPreferences(proactivity_level=level))
        return store

    return _make


@pytest.fixture
def sample_store() -> InMemoryStore:
    return InMemoryStore.from_yaml(SAMPLE_FIXTURE)
