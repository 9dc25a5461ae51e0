"""Data models for jobs, specialists, suggestions and estimates."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum


def as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken to be UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class JobStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssistantMode(str, Enum):
    MATCHING = "MATCHING"
    PROJECT_SETUP = "PROJECT_SETUP"
    PROFILE = "PROFILE"
    PAYMENTS = "PAYMENTS"
    MARKETPLACE = "MARKETPLACE"
    GENERAL = "GENERAL"

    @classmethod
    def parse(cls, value: "AssistantMode | str | None") -> "AssistantMode":
        """Unknown or empty modes fall back to GENERAL."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return cls.GENERAL


class Priority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class TimeSlot:
    day: str
    slot: str


@dataclass
class ClientReputation:
    overall_rating: float
    reliability: float
    communication: float
    fair_payment: float
    respectfulness: float
    total_ratings: int = 0
    badges: list[str] = field(default_factory=list)


@dataclass
class PremiumFeatures:
    is_premium: bool = False
    level: str | None = None  # basic | pro | elite
    featured_profile: bool = False
    verified_only: bool = False
    boost_factor: float | None = None


@dataclass
class JobRecord:
    id: str
    title: str
    description: str = ""
    status: JobStatus = JobStatus.OPEN
    location: Coordinates | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    urgency: Urgency = Urgency.MEDIUM
    created_at: datetime | None = None
    category: str | None = None
    customer_id: str | None = None
    required_skills: list[str] = field(default_factory=list)
    requested_slots: list[TimeSlot] = field(default_factory=list)
    verified_payment: bool = False
    client_reputation: ClientReputation | None = None
    client_reviewed: bool = False


@dataclass
class SpecialistProfile:
    id: str
    name: str
    skills: list[str] = field(default_factory=list)
    location: Coordinates | None = None
    service_radius_km: float | None = None
    hourly_rate_min: float | None = None
    hourly_rate_max: float | None = None
    preferred_rate: float | None = None
    availability: dict[str, list[str]] = field(default_factory=dict)
    rating: float | None = None
    completed_jobs: int = 0
    response_time_minutes: float | None = None
    verification_level: int = 0
    user_id: str | None = None
    premium: PremiumFeatures | None = None


@dataclass
class MatchFactors:
    skill_match: float
    location_proximity: float
    price_match: float
    reputation_score: float
    availability_match: float

    def as_dict(self) -> dict[str, float]:
        return {
            "skill_match": self.skill_match,
            "location_proximity": self.location_proximity,
            "price_match": self.price_match,
            "reputation_score": self.reputation_score,
            "availability_match": self.availability_match,
        }


@dataclass
class MatchResult:
    score: int
    factors: MatchFactors
    explanations: list[str] = field(default_factory=list)


@dataclass
class ScoredMatch:
    job: JobRecord
    result: MatchResult


@dataclass
class Suggestion:
    user_id: str
    mode: AssistantMode
    context: str
    title: str
    content: str
    priority: int
    action_url: str | None = None
    is_active: bool = True
    ai_generated: bool = False
    relevance_score: int | None = None


@dataclass
class PriceEstimate:
    category: str
    complexity: str
    experience: str
    region: str
    duration: str
    hours: int
    hourly_min: int
    hourly_max: int
    total_min: int
    total_max: int
    explanation: str
    # Selectors that fell back to a default entry; not part of equality.
    defaulted: tuple[str, ...] = field(default=(), compare=False)


@dataclass
class PriceHistoryEntry:
    user_id: str
    category: str
    complexity: str
    experience: str
    region: str
    duration: str
    hours: int
    created_at: str = ""


@dataclass
class UserSkill:
    name: str
    endorsements: int = 0


@dataclass
class Application:
    id: str
    job_title: str
    created_at: datetime


@dataclass
class UserState:
    id: str
    role: str = "CUSTOMER"  # CUSTOMER | SPECIALIST
    bio: str = ""
    skills: list[UserSkill] = field(default_factory=list)
    services: list[str] = field(default_factory=list)
    portfolio_items: int = 0
    jobs_posted: list[JobRecord] = field(default_factory=list)
    applications: list[Application] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def is_specialist(self) -> bool:
        return self.role.upper() == "SPECIALIST"

    @property
    def skill_names(self) -> list[str]:
        return [s.name for s in self.skills]


@dataclass
class AssistantPreferences:
    proactivity_level: int = 2
    is_enabled: bool = True


@dataclass
class MemoryLog:
    action: str = ""
    context: str = ""
    mode: str | None = None
    interaction_type: str = ""
    helpful: bool = False
    created_at: datetime | None = None


@dataclass
class Listing:
    id: str
    title: str
    category: str
    description: str = ""
    subcategory: str | None = None
    price: float | None = None
    location: Coordinates | None = None
    requirements: list[str] = field(default_factory=list)
    rating: float | None = None
    owner_name: str = ""


@dataclass
class UserPreferences:
    user_id: str
    location: Coordinates | None = None
    max_distance_km: float = 25.0
    min_price: float | None = None
    max_price: float | None = None
    desired_keywords: list[str] = field(default_factory=list)
    preferred_categories: list[str] = field(default_factory=list)


@dataclass
class CompatibilityDimension:
    name: str
    score: int
    weight: float
    description: str = ""


@dataclass
class CompatibilityResult:
    user_id: str
    listing_id: str
    category: str
    overall_score: int
    dimensions: list[CompatibilityDimension]
    primary_match_reason: str = ""
    improvement_suggestions: list[str] = field(default_factory=list)


@dataclass
class ScoredListing:
    listing: Listing
    result: CompatibilityResult


@dataclass
class CompatibilityInsight:
    title: str
    description: str
    category: str
    listings: list[ScoredListing]
