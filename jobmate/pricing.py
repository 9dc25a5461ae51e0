"""Price estimator: rate tables, estimate arithmetic and free-text queries.

Every table lookup falls back to a fixed default entry instead of raising,
and reports that it did so through ``Lookup.used_default`` so callers can
tell an exact hit from a substitution.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from jobmate.log import get_logger
from jobmate.models import PriceEstimate
from jobmate.weights import round_half_up

log = get_logger(__name__)

DEFAULT_HOURS = 40
HOURS_PER_DAY = 8
HOURS_PER_WEEK = 40
HOURS_PER_MONTH = 160


@dataclass(frozen=True)
class JobCategory:
    name: str
    base_rate_min: float
    base_rate_max: float
    description: str


@dataclass(frozen=True)
class ComplexityLevel:
    name: str
    multiplier: float
    description: str


@dataclass(frozen=True)
class ExperienceLevel:
    name: str
    adjustment: float
    description: str


@dataclass(frozen=True)
class LocationFactor:
    name: str
    factor: float
    description: str


@dataclass(frozen=True)
class DurationImpact:
    name: str
    impact: float
    description: str


JOB_CATEGORIES: tuple[JobCategory, ...] = (
    JobCategory("Web Development", 35, 150, "Website creation, web applications, e-commerce sites"),
    JobCategory("Mobile Development", 40, 160, "iOS, Android, cross-platform mobile applications"),
    JobCategory("UI/UX Design", 30, 120, "User interface design, user experience, wireframing"),
    JobCategory("Graphic Design", 25, 100, "Logos, branding, marketing materials, illustrations"),
    JobCategory("Content Writing", 20, 80, "Blog posts, articles, website copy, technical writing"),
    JobCategory("Digital Marketing", 30, 120, "SEO, SEM, social media marketing, email campaigns"),
    JobCategory("Data Analysis", 40, 150, "Data processing, visualization, insights, reporting"),
    JobCategory("Video Production", 45, 180, "Video editing, animation, motion graphics"),
)

COMPLEXITY_LEVELS: tuple[ComplexityLevel, ...] = (
    ComplexityLevel("Basic", 0.8, "Simple functionality, minimal features, standard design"),
    ComplexityLevel("Standard", 1.0, "Average complexity, common features, custom design"),
    ComplexityLevel("Complex", 1.3, "Advanced functionality, multiple integrations, unique features"),
    ComplexityLevel(
        "Enterprise", 1.8,
        "High complexity, scalability requirements, security features, custom architecture",
    ),
)

EXPERIENCE_LEVELS: tuple[ExperienceLevel, ...] = (
    ExperienceLevel("Entry Level", -0.2, "0-2 years of experience"),
    ExperienceLevel("Intermediate", 0.0, "2-5 years of experience"),
    ExperienceLevel("Senior", 0.3, "5-8 years of experience"),
    ExperienceLevel("Expert", 0.6, "8+ years of experience, industry recognition"),
)

LOCATION_FACTORS: tuple[LocationFactor, ...] = (
    LocationFactor("North America", 1.2, "USA, Canada"),
    LocationFactor("Western Europe", 1.1, "UK, Germany, France, etc."),
    LocationFactor("Eastern Europe", 0.7, "Poland, Ukraine, Romania, etc."),
    LocationFactor("Asia", 0.6, "India, Philippines, etc."),
    LocationFactor("Latin America", 0.65, "Brazil, Mexico, Argentina, etc."),
    LocationFactor("Australia/NZ", 1.15, "Australia, New Zealand"),
)

DURATION_IMPACTS: tuple[DurationImpact, ...] = (
    DurationImpact("Short-term (< 1 week)", 0.15, "Quick turnaround premium"),
    DurationImpact("Medium-term (1-4 weeks)", 0.0, "Standard timeline"),
    DurationImpact("Long-term (1-3 months)", -0.05, "Slight discount for longer engagement"),
    DurationImpact("Extended (3+ months)", -0.1, "Discount for stable long-term work"),
)

DEFAULT_CATEGORY = JOB_CATEGORIES[0].name
DEFAULT_COMPLEXITY = "Standard"
DEFAULT_EXPERIENCE = "Intermediate"
DEFAULT_REGION = LOCATION_FACTORS[0].name
DEFAULT_DURATION = "Medium-term (1-4 weeks)"

SHORT_TERM, MEDIUM_TERM, LONG_TERM, EXTENDED = (d.name for d in DURATION_IMPACTS)

T = TypeVar("T")


@dataclass(frozen=True)
class Lookup(Generic[T]):
    value: T
    used_default: bool


def _lookup(table: Sequence[T], name: str | None, default: str) -> Lookup[T]:
    for entry in table:
        if entry.name == name:  # type: ignore[attr-defined]
            return Lookup(entry, False)
    fallback = next(e for e in table if e.name == default)  # type: ignore[attr-defined]
    return Lookup(fallback, True)


def lookup_category(name: str | None) -> Lookup[JobCategory]:
    return _lookup(JOB_CATEGORIES, name, DEFAULT_CATEGORY)


def lookup_complexity(name: str | None) -> Lookup[ComplexityLevel]:
    return _lookup(COMPLEXITY_LEVELS, name, DEFAULT_COMPLEXITY)


def lookup_experience(name: str | None) -> Lookup[ExperienceLevel]:
    return _lookup(EXPERIENCE_LEVELS, name, DEFAULT_EXPERIENCE)


def lookup_region(name: str | None) -> Lookup[LocationFactor]:
    return _lookup(LOCATION_FACTORS, name, DEFAULT_REGION)


def lookup_duration(name: str | None) -> Lookup[DurationImpact]:
    return _lookup(DURATION_IMPACTS, name, DEFAULT_DURATION)


def _valid_hours(hours: object) -> int | None:
    if isinstance(hours, bool):
        return None
    try:
        value = int(hours)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None
    return value if value > 0 else None


def calculate_price_estimate(
    category: str | None = None,
    complexity: str | None = DEFAULT_COMPLEXITY,
    experience: str | None = DEFAULT_EXPERIENCE,
    region: str | None = DEFAULT_REGION,
    duration: str | None = DEFAULT_DURATION,
    hours: int | None = DEFAULT_HOURS,
    *,
    default_hours: int = DEFAULT_HOURS,
) -> PriceEstimate:
    """Hourly and total price range for one combination of selectors.

    Unknown selector names resolve to their default entry and are listed in
    ``PriceEstimate.defaulted``. Missing or non-positive *hours* become
    *default_hours*. Never raises.
    """
    cat = lookup_category(category)
    comp = lookup_complexity(complexity)
    exp = lookup_experience(experience)
    loc = lookup_region(region)
    dur = lookup_duration(duration)

    defaulted = tuple(
        name
        for name, found in (
            ("category", cat), ("complexity", comp), ("experience", exp),
            ("region", loc), ("duration", dur),
        )
        if found.used_default
    )
    work_hours = _valid_hours(hours)
    if work_hours is None:
        work_hours = default_hours
        defaulted += ("hours",)
    if defaulted:
        log.debug("Price estimate fell back to defaults for: %s", ", ".join(defaulted))

    def hourly(base_rate: float) -> int:
        return round_half_up(
            base_rate
            * comp.value.multiplier
            * (1 + exp.value.adjustment)
            * loc.value.factor
            * (1 + dur.value.impact)
        )

    hourly_min = hourly(cat.value.base_rate_min)
    hourly_max = hourly(cat.value.base_rate_max)
    total_min = hourly_min * work_hours
    total_max = hourly_max * work_hours

    explanation = (
        "This estimate is based on:\n"
        f"- {cat.value.name} ({cat.value.description})\n"
        f"- {comp.value.name} complexity ({comp.value.description})\n"
        f"- {exp.value.name} specialist ({exp.value.description})\n"
        f"- {loc.value.name} rates ({loc.value.description})\n"
        f"- {dur.value.name} project ({dur.value.description})\n"
        f"- Estimated {work_hours} hours of work\n"
        "\n"
        f"For similar projects on JobMate, specialists typically charge between "
        f"${hourly_min}-{hourly_max}/hour.\n"
        f"The total project cost typically ranges from ${total_min}-{total_max}.\n"
        "\n"
        "Note: Actual prices may vary based on specific requirements, "
        "specialist availability, and market conditions."
    )

    return PriceEstimate(
        category=cat.value.name,
        complexity=comp.value.name,
        experience=exp.value.name,
        region=loc.value.name,
        duration=dur.value.name,
        hours=work_hours,
        hourly_min=hourly_min,
        hourly_max=hourly_max,
        total_min=total_min,
        total_max=total_max,
        explanation=explanation,
        defaulted=defaulted,
    )


# ── Free-text queries ────────────────────────────────────────────────────

# (keywords, value); first row with any keyword present wins.
# Categories are checked after the web, mobile and UI/UX rules in _parse_category.
CATEGORY_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("graphic", "logo"), "Graphic Design"),
    (("content", "writ"), "Content Writing"),
    (("market",), "Digital Marketing"),
    (("data", "analy"), "Data Analysis"),
    (("video",), "Video Production"),
)

COMPLEXITY_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("simple", "basic"), "Basic"),
    (("complex", "advanced"), "Complex"),
    (("enterprise", "large scale"), "Enterprise"),
)

EXPERIENCE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("entry", "junior", "beginner"), "Entry Level"),
    (("senior", "experienced"), "Senior"),
    (("expert", "specialist"), "Expert"),
)

REGION_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("asia", "india", "philippines"), "Asia"),
    (("latin", "south america", "brazil", "mexico"), "Latin America"),
    (("australia", "zealand"), "Australia/NZ"),
)

URGENCY_WORDS = ("quick", "fast", "urgent")

_HOURS_RE = re.compile(r"(\d+)\s*hours?")
_DAYS_RE = re.compile(r"(\d+)\s*days?")
_WEEKS_RE = re.compile(r"(\d+)\s*weeks?")
_MONTHS_RE = re.compile(r"(\d+)\s*months?")


def _first_match(
    text: str, rows: tuple[tuple[tuple[str, ...], str], ...], default: str
) -> str:
    for keywords, value in rows:
        if any(k in text for k in keywords):
            return value
    return default


def _parse_category(text: str) -> str:
    if "web" in text or "website" in text:
        return "Web Development"
    if "mobile" in text or "app" in text:
        return "Mobile Development"
    if "design" in text and ("ui" in text or "ux" in text):
        return "UI/UX Design"
    return _first_match(text, CATEGORY_KEYWORDS, DEFAULT_CATEGORY)


def _parse_region(text: str) -> str:
    if "europe" in text:
        return "Eastern Europe" if "east" in text else "Western Europe"
    return _first_match(text, REGION_KEYWORDS, DEFAULT_REGION)


def _parse_duration(text: str) -> str:
    if any(w in text for w in URGENCY_WORDS):
        return SHORT_TERM
    if "month" in text:
        m = _MONTHS_RE.search(text)
        if (m and int(m.group(1)) >= 3) or "three" in text or "several" in text:
            return EXTENDED
        return LONG_TERM
    if "week" in text:
        m = _WEEKS_RE.search(text)
        if m:
            weeks = int(m.group(1))
            if weeks >= 3:
                return LONG_TERM
            if weeks >= 1:
                return MEDIUM_TERM
        return SHORT_TERM
    return DEFAULT_DURATION


def _parse_hours(text: str, default_hours: int) -> int:
    for pattern, per_unit in (
        (_HOURS_RE, 1),
        (_DAYS_RE, HOURS_PER_DAY),
        (_WEEKS_RE, HOURS_PER_WEEK),
        (_MONTHS_RE, HOURS_PER_MONTH),
    ):
        m = pattern.search(text)
        if m:
            hours = int(m.group(1)) * per_unit
            return hours if hours > 0 else default_hours
    return default_hours


def parse_query(query: str, *, default_hours: int = DEFAULT_HOURS) -> dict[str, object]:
    """Selector values extracted from a free-text request."""
    text = (query or "").lower()
    return {
        "category": _parse_category(text),
        "complexity": _first_match(text, COMPLEXITY_KEYWORDS, DEFAULT_COMPLEXITY),
        "experience": _first_match(text, EXPERIENCE_KEYWORDS, DEFAULT_EXPERIENCE),
        "region": _parse_region(text),
        "duration": _parse_duration(text),
        "hours": _parse_hours(text, default_hours),
    }


def estimate_from_query(query: str, *, default_hours: int = DEFAULT_HOURS) -> PriceEstimate:
    params = parse_query(query, default_hours=default_hours)
    log.debug("Parsed price query %r → %s", query, params)
    return calculate_price_estimate(**params, default_hours=default_hours)  # type: ignore[arg-type]
