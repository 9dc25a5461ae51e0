"""Data-store interface and an in-memory implementation loaded from YAML fixtures."""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from jobmate import pricing
from jobmate.log import get_logger
from jobmate.matcher import DEFAULT_RADIUS_KM, MIN_COMPLETED_JOBS, filter_and_rank
from jobmate.models import (
    Application,
    AssistantPreferences,
    ClientReputation,
    Coordinates,
    JobRecord,
    JobStatus,
    Listing,
    MemoryLog,
    PremiumFeatures,
    PriceHistoryEntry,
    SpecialistProfile,
    TimeSlot,
    Urgency,
    UserPreferences,
    UserSkill,
    UserState,
    as_utc,
)
from jobmate.price_history import get_user_history

log = get_logger(__name__)


class DataStore(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> UserState | None:
        pass

    @abstractmethod
    def get_preferences(self, user_id: str) -> AssistantPreferences | None:
        pass

    @abstractmethod
    def find_matches_for_user(self, user_id: str, limit: int = 3) -> list[JobRecord]:
        pass

    @abstractmethod
    def has_payment_method(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def count_pending_payments(self, user_id: str) -> int:
        pass

    @abstractmethod
    def count_unread_notifications(self, user_id: str) -> int:
        pass

    @abstractmethod
    def get_price_history(self, user_id: str) -> list[PriceHistoryEntry]:
        pass

    @abstractmethod
    def get_memory_logs(self, user_id: str, limit: int = 50) -> list[MemoryLog]:
        pass


class InMemoryStore(DataStore):
    """Dictionary-backed store for tests and the command-line runner."""

    def __init__(
        self,
        *,
        users: dict[str, UserState] | None = None,
        preferences: dict[str, AssistantPreferences] | None = None,
        jobs: list[JobRecord] | None = None,
        specialists: list[SpecialistProfile] | None = None,
        payment_methods: set[str] | None = None,
        pending_payments: dict[str, int] | None = None,
        unread_notifications: dict[str, int] | None = None,
        price_history: dict[str, list[PriceHistoryEntry]] | None = None,
        memory_logs: dict[str, list[MemoryLog]] | None = None,
        listings: list[Listing] | None = None,
        listing_preferences: dict[str, UserPreferences] | None = None,
        history_path: Path | None = None,
        min_score: int = 20,
        default_radius_km: float = DEFAULT_RADIUS_KM,
        min_completed_jobs: int = MIN_COMPLETED_JOBS,
    ) -> None:
        self.users = users or {}
        self.preferences = preferences or {}
        self.jobs = jobs or []
        self.specialists = specialists or []
        self.payment_methods = payment_methods or set()
        self.pending_payments = pending_payments or {}
        self.unread_notifications = unread_notifications or {}
        self.price_history = price_history or {}
        self.memory_logs = memory_logs or {}
        self.listings = listings or []
        self.listing_preferences = listing_preferences or {}
        self.history_path = history_path
        self.min_score = min_score
        self.default_radius_km = default_radius_km
        self.min_completed_jobs = min_completed_jobs

    def get_user(self, user_id: str) -> UserState | None:
        return self.users.get(user_id)

    def get_preferences(self, user_id: str) -> AssistantPreferences | None:
        return self.preferences.get(user_id)

    def specialist_for_user(self, user_id: str) -> SpecialistProfile | None:
        return next((s for s in self.specialists if s.user_id == user_id), None)

    def find_matches_for_user(self, user_id: str, limit: int = 3) -> list[JobRecord]:
        specialist = self.specialist_for_user(user_id)
        if specialist is None:
            log.debug("No specialist profile for user %s", user_id)
            return []
        ranked = filter_and_rank(
            self.jobs,
            specialist,
            self.min_score,
            default_radius_km=self.default_radius_km,
            min_completed_jobs=self.min_completed_jobs,
        )
        return [m.job for m in ranked[:limit]]

    def has_payment_method(self, user_id: str) -> bool:
        return user_id in self.payment_methods

    def count_pending_payments(self, user_id: str) -> int:
        return self.pending_payments.get(user_id, 0)

    def count_unread_notifications(self, user_id: str) -> int:
        return self.unread_notifications.get(user_id, 0)

    def get_price_history(self, user_id: str) -> list[PriceHistoryEntry]:
        """Fixture history first, then estimates logged to *history_path*."""
        history = list(self.price_history.get(user_id, []))
        if self.history_path is not None:
            history += get_user_history(user_id, path=self.history_path)
        return history

    def get_memory_logs(self, user_id: str, limit: int = 50) -> list[MemoryLog]:
        logs = sorted(
            self.memory_logs.get(user_id, []),
            key=lambda m: as_utc(m.created_at) or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        return logs[:limit]

    @classmethod
    def from_yaml(cls, path: Path, **kwargs: Any) -> "InMemoryStore":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: expected a mapping at the top level")
        store = cls.from_dict(data, **kwargs)
        log.info(
            "Loaded %s: %d users, %d jobs, %d specialists, %d listings",
            path.name, len(store.users), len(store.jobs),
            len(store.specialists), len(store.listings),
        )
        return store

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> "InMemoryStore":
        jobs = [parse_job(j) for j in data.get("jobs") or []]
        jobs_by_id = {j.id: j for j in jobs}
        store = cls(
            jobs=jobs,
            specialists=[parse_specialist(s) for s in data.get("specialists") or []],
            listings=[parse_listing(item) for item in data.get("listings") or []],
            **kwargs,
        )

        for raw in data.get("users") or []:
            user = parse_user(raw, jobs_by_id)
            store.users[user.id] = user
            if raw.get("preferences") is not None:
                prefs = raw["preferences"]
                store.preferences[user.id] = AssistantPreferences(
                    proactivity_level=int(prefs.get("proactivity_level", 2)),
                    is_enabled=bool(prefs.get("is_enabled", True)),
                )
            if raw.get("has_payment_method"):
                store.payment_methods.add(user.id)
            store.pending_payments[user.id] = int(raw.get("pending_payments", 0))
            store.unread_notifications[user.id] = int(raw.get("unread_notifications", 0))
            store.memory_logs[user.id] = [parse_memory_log(m) for m in raw.get("memory_logs") or []]
            store.price_history[user.id] = [
                parse_history_entry(user.id, h) for h in raw.get("price_history") or []
            ]
            if raw.get("listing_preferences") is not None:
                store.listing_preferences[user.id] = parse_user_preferences(
                    user.id, raw["listing_preferences"]
                )
        return store


# ── Fixture parsing ──────────────────────────────────────────────────────


def _dt(value: Any) -> datetime | None:
    """YAML timestamps and ISO strings as UTC-aware datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return as_utc(dt)


def _coords(value: Any) -> Coordinates | None:
    if not value:
        return None
    return Coordinates(lat=float(value["lat"]), lng=float(value["lng"]))


def _opt_float(value: Any) -> float | None:
    return None if value is None else float(value)


def parse_job(d: dict[str, Any]) -> JobRecord:
    rep = d.get("client_reputation")
    return JobRecord(
        id=str(d["id"]),
        title=d["title"],
        description=d.get("description", ""),
        status=JobStatus(str(d.get("status", "open")).lower()),
        location=_coords(d.get("location")),
        budget_min=_opt_float(d.get("budget_min")),
        budget_max=_opt_float(d.get("budget_max")),
        urgency=Urgency(str(d.get("urgency", "medium")).lower()),
        created_at=_dt(d.get("created_at")),
        category=d.get("category"),
        customer_id=d.get("customer_id"),
        required_skills=list(d.get("required_skills") or []),
        requested_slots=[TimeSlot(day=s["day"], slot=s["slot"]) for s in d.get("requested_slots") or []],
        verified_payment=bool(d.get("verified_payment", False)),
        client_reputation=ClientReputation(**rep) if rep else None,
        client_reviewed=bool(d.get("client_reviewed", False)),
    )


def parse_specialist(d: dict[str, Any]) -> SpecialistProfile:
    prem = d.get("premium")
    return SpecialistProfile(
        id=str(d["id"]),
        name=d["name"],
        skills=list(d.get("skills") or []),
        location=_coords(d.get("location")),
        service_radius_km=_opt_float(d.get("service_radius_km")),
        hourly_rate_min=_opt_float(d.get("hourly_rate_min")),
        hourly_rate_max=_opt_float(d.get("hourly_rate_max")),
        preferred_rate=_opt_float(d.get("preferred_rate")),
        availability={str(k): list(v) for k, v in (d.get("availability") or {}).items()},
        rating=_opt_float(d.get("rating")),
        completed_jobs=int(d.get("completed_jobs", 0)),
        response_time_minutes=_opt_float(d.get("response_time_minutes")),
        verification_level=int(d.get("verification_level", 0)),
        user_id=d.get("user_id"),
        premium=PremiumFeatures(**prem) if prem else None,
    )


def parse_user(d: dict[str, Any], jobs_by_id: dict[str, JobRecord]) -> UserState:
    skills = [
        UserSkill(name=s) if isinstance(s, str)
        else UserSkill(name=s["name"], endorsements=int(s.get("endorsements", 0)))
        for s in d.get("skills") or []
    ]
    posted: list[JobRecord] = []
    for job_id in d.get("jobs_posted") or []:
        if job_id not in jobs_by_id:
            raise KeyError(f"User {d['id']} references unknown job {job_id!r}")
        posted.append(jobs_by_id[job_id])
    return UserState(
        id=str(d["id"]),
        role=str(d.get("role", "CUSTOMER")).upper(),
        bio=d.get("bio") or "",
        skills=skills,
        services=list(d.get("services") or []),
        portfolio_items=int(d.get("portfolio_items", 0)),
        jobs_posted=posted,
        applications=[
            Application(id=str(a["id"]), job_title=a["job_title"], created_at=_dt(a["created_at"]))
            for a in d.get("applications") or []
        ],
        created_at=_dt(d.get("created_at")),
    )


def parse_memory_log(d: dict[str, Any]) -> MemoryLog:
    return MemoryLog(
        action=d.get("action", ""),
        context=d.get("context", ""),
        mode=d.get("mode"),
        interaction_type=d.get("interaction_type", ""),
        helpful=bool(d.get("helpful", False)),
        created_at=_dt(d.get("created_at")),
    )


def parse_history_entry(user_id: str, d: dict[str, Any]) -> PriceHistoryEntry:
    return PriceHistoryEntry(
        user_id=user_id,
        category=d["category"],
        complexity=d.get("complexity", pricing.DEFAULT_COMPLEXITY),
        experience=d.get("experience", pricing.DEFAULT_EXPERIENCE),
        region=d.get("region", pricing.DEFAULT_REGION),
        duration=d.get("duration", pricing.DEFAULT_DURATION),
        hours=int(d.get("hours", pricing.DEFAULT_HOURS)),
        created_at=str(d.get("created_at", "")),
    )


def parse_listing(d: dict[str, Any]) -> Listing:
    return Listing(
        id=str(d["id"]),
        title=d["title"],
        category=d["category"],
        description=d.get("description", ""),
        subcategory=d.get("subcategory"),
        price=_opt_float(d.get("price")),
        location=_coords(d.get("location")),
        requirements=list(d.get("requirements") or []),
        rating=_opt_float(d.get("rating")),
        owner_name=d.get("owner_name", ""),
    )


def parse_user_preferences(user_id: str, d: dict[str, Any]) -> UserPreferences:
    return UserPreferences(
        user_id=user_id,
        location=_coords(d.get("location")),
        max_distance_km=float(d.get("max_distance_km", 25)),
        min_price=_opt_float(d.get("min_price")),
        max_price=_opt_float(d.get("max_price")),
        desired_keywords=list(d.get("desired_keywords") or []),
        preferred_categories=list(d.get("preferred_categories") or []),
    )
