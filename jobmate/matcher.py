"""Score and rank jobs against a specialist profile."""
from __future__ import annotations

import math

from jobmate import premium, weights
from jobmate.log import get_logger
from jobmate.models import (
    Coordinates,
    JobRecord,
    JobStatus,
    MatchFactors,
    MatchResult,
    ScoredMatch,
    SpecialistProfile,
    Urgency,
)

log = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 50.0
MIN_COMPLETED_JOBS = 10
NEUTRAL = 0.5

# Response time (minutes) a job's urgency implies
EXPECTED_RESPONSE_MINUTES: dict[Urgency, float] = {
    Urgency.HIGH: 60,
    Urgency.MEDIUM: 240,
    Urgency.LOW: 1440,
}


def _normalize(s: str | None) -> str:
    return (s or "").lower().strip()


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


# ── Feature extractors ───────────────────────────────────────────────────


def skill_match(required: list[str], skills: list[str]) -> float:
    """Fraction of required skills the specialist has (case-insensitive)."""
    wanted = {_normalize(s) for s in required if _normalize(s)}
    if not wanted:
        return 1.0
    have = {_normalize(s) for s in skills}
    return len(wanted & have) / len(wanted)


def location_proximity(
    job_location: Coordinates | None,
    specialist_location: Coordinates | None,
    radius_km: float | None,
    *,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> float:
    """Linear falloff from 1 at the job site to 0 at the service radius."""
    if job_location is None or specialist_location is None:
        return NEUTRAL
    radius = radius_km if radius_km and radius_km > 0 else default_radius_km
    distance = haversine_km(job_location, specialist_location)
    if distance >= radius:
        return 0.0
    return max(0.0, min(1.0, 1 - distance / radius))


def _budget_range(job: JobRecord) -> tuple[float, float] | None:
    lo, hi = job.budget_min, job.budget_max
    if lo is None and hi is None:
        return None
    low = 0.0 if lo is None else float(lo)
    high = math.inf if hi is None else float(hi)
    if low > high:
        log.debug("Job %s has budget_min > budget_max, swapping", job.id)
        low, high = high, low
    return low, high


def _rate_range(specialist: SpecialistProfile) -> tuple[float, float] | None:
    lo, hi = specialist.hourly_rate_min, specialist.hourly_rate_max
    if lo is None and hi is None:
        if specialist.preferred_rate is None:
            return None
        rate = float(specialist.preferred_rate)
        return rate, rate
    low = float(hi if lo is None else lo)
    high = float(lo if hi is None else hi)
    if low > high:
        low, high = high, low
    return low, high


def range_overlap(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Overlap length relative to the narrower range, in [0, 1]."""
    lo = max(a[0], b[0])
    hi = min(a[1], b[1])
    if hi < lo:
        return 0.0
    narrower = min(a[1] - a[0], b[1] - b[0])
    if narrower <= 0:
        return 1.0
    return min(1.0, (hi - lo) / narrower)


def price_match(job: JobRecord, specialist: SpecialistProfile) -> float:
    budget = _budget_range(job)
    rates = _rate_range(specialist)
    if budget is None or rates is None:
        return 1.0
    return range_overlap(budget, rates)


def reputation_score(
    specialist: SpecialistProfile, *, min_completed_jobs: int = MIN_COMPLETED_JOBS
) -> float:
    """Rating / 5, pulled toward neutral while the job count is low."""
    if specialist.rating is None:
        return NEUTRAL
    raw = min(max(float(specialist.rating), 0.0), 5.0) / 5.0
    completed = max(specialist.completed_jobs, 0)
    if min_completed_jobs <= 0 or completed >= min_completed_jobs:
        return raw
    confidence = completed / min_completed_jobs
    return NEUTRAL + (raw - NEUTRAL) * confidence


def _responsiveness(urgency: Urgency, response_minutes: float | None) -> float:
    if response_minutes is None or response_minutes <= 0:
        return 1.0
    expected = EXPECTED_RESPONSE_MINUTES.get(urgency, EXPECTED_RESPONSE_MINUTES[Urgency.MEDIUM])
    if response_minutes <= expected:
        return 1.0
    return expected / response_minutes


def availability_match(job: JobRecord, specialist: SpecialistProfile) -> float:
    """Share of requested slots covered, scaled by response-time fit."""
    requested = list(dict.fromkeys(job.requested_slots))
    if not requested:
        coverage = 1.0
    elif not specialist.availability:
        coverage = NEUTRAL
    else:
        offered = {
            (_normalize(day), _normalize(slot))
            for day, slots in specialist.availability.items()
            for slot in slots
        }
        covered = sum(1 for s in requested if (_normalize(s.day), _normalize(s.slot)) in offered)
        coverage = covered / len(requested)
    return coverage * _responsiveness(job.urgency, specialist.response_time_minutes)


# ── Aggregation ──────────────────────────────────────────────────────────


def compute_factors(
    job: JobRecord,
    specialist: SpecialistProfile,
    *,
    default_radius_km: float = DEFAULT_RADIUS_KM,
    min_completed_jobs: int = MIN_COMPLETED_JOBS,
) -> MatchFactors:
    return MatchFactors(
        skill_match=skill_match(job.required_skills, specialist.skills),
        location_proximity=location_proximity(
            job.location,
            specialist.location,
            specialist.service_radius_km,
            default_radius_km=default_radius_km,
        ),
        price_match=price_match(job, specialist),
        reputation_score=reputation_score(specialist, min_completed_jobs=min_completed_jobs),
        availability_match=availability_match(job, specialist),
    )


def aggregate(factors: MatchFactors) -> int:
    w = weights.DIMENSION_WEIGHTS
    total = (
        w[weights.SKILLS] * factors.skill_match
        + w[weights.LOCATION] * factors.location_proximity
        + w[weights.PRICE] * factors.price_match
        + w[weights.REPUTATION] * factors.reputation_score
        + w[weights.AVAILABILITY] * factors.availability_match
    )
    return max(0, min(100, weights.round_half_up(total * 100)))


def explain_match(job: JobRecord, specialist: SpecialistProfile, factors: MatchFactors) -> list[str]:
    reasons: list[str] = []
    subject = job.category or "this job"

    if factors.skill_match > 0.8:
        reasons.append(f"Strong skills match for {subject}")
    elif factors.skill_match > 0.5:
        reasons.append(f"Good skills match for {subject}")
    elif factors.skill_match > 0:
        reasons.append(f"Some relevant skills for {subject}")

    if job.location and specialist.location:
        distance = haversine_km(job.location, specialist.location)
        if distance < 2:
            reasons.append(f"Very close to job location ({distance:.1f} km)")
        elif distance < 10:
            reasons.append(f"Near job location ({distance:.1f} km)")
        else:
            reasons.append(f"{distance:.1f} km from job location")
    else:
        reasons.append("Location information not available")

    if specialist.rating:
        if factors.reputation_score > 0.8:
            reasons.append(f"Highly rated specialist ({specialist.rating}/5)")
        elif factors.reputation_score > 0.6:
            reasons.append(f"Well-rated specialist ({specialist.rating}/5)")

    if factors.price_match > 0.9:
        reasons.append("Perfect price match")
    elif factors.price_match > 0.7:
        reasons.append("Good price match")
    elif factors.price_match < 0.3:
        reasons.append("Price may be outside the budget")

    if job.urgency == Urgency.HIGH and factors.availability_match > 0.7:
        reasons.append("Quick response time for an urgent job")

    if specialist.verification_level >= 2:
        reasons.append(f"Verified specialist (level {specialist.verification_level})")

    if job.client_reputation and premium.client_reputation_score(job.client_reputation) >= 0.8:
        reasons.append("Client has a strong reputation")

    return reasons


def score_match(
    job: JobRecord,
    specialist: SpecialistProfile,
    *,
    default_radius_km: float = DEFAULT_RADIUS_KM,
    min_completed_jobs: int = MIN_COMPLETED_JOBS,
) -> MatchResult:
    factors = compute_factors(
        job,
        specialist,
        default_radius_km=default_radius_km,
        min_completed_jobs=min_completed_jobs,
    )
    return MatchResult(
        score=aggregate(factors),
        factors=factors,
        explanations=explain_match(job, specialist, factors),
    )


def filter_and_rank(
    jobs: list[JobRecord],
    specialist: SpecialistProfile,
    min_score: int = 20,
    *,
    default_radius_km: float = DEFAULT_RADIUS_KM,
    min_completed_jobs: int = MIN_COMPLETED_JOBS,
) -> list[ScoredMatch]:
    scored: list[ScoredMatch] = []
    for job in jobs:
        if job.status != JobStatus.OPEN:
            continue
        if not premium.can_access_job(job, specialist):
            continue
        result = score_match(
            job,
            specialist,
            default_radius_km=default_radius_km,
            min_completed_jobs=min_completed_jobs,
        )
        if specialist.premium and specialist.premium.is_premium:
            result = premium.apply_premium_boost(result, specialist.premium)
        scored.append(ScoredMatch(job=job, result=result))

    result = sorted([s for s in scored if s.result.score >= min_score], key=lambda s: -s.result.score)
    log.info(
        "Scored %d jobs for %s → %d at or above %d%%",
        len(scored), specialist.id, len(result), min_score,
    )
    return result
