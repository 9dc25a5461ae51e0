"""Premium specialist boosts, client reputation and job visibility rules."""
from __future__ import annotations

from jobmate.models import (
    ClientReputation,
    JobRecord,
    MatchResult,
    PremiumFeatures,
    SpecialistProfile,
)
from jobmate.weights import round_half_up

PREMIUM_BOOSTS: dict[str, float] = {
    "basic": 1.05,
    "pro": 1.10,
    "elite": 1.15,
}
DEFAULT_BOOST = 1.05

CLIENT_REPUTATION_WEIGHTS: dict[str, float] = {
    "overall_rating": 0.30,
    "reliability": 0.25,
    "communication": 0.20,
    "fair_payment": 0.15,
    "respectfulness": 0.10,
}
# Ratings needed before a client's reputation is taken at face value
CLIENT_CONFIDENCE_RATINGS = 10


def boost_factor(features: PremiumFeatures) -> float:
    if features.boost_factor:
        return features.boost_factor
    return PREMIUM_BOOSTS.get((features.level or "").lower(), DEFAULT_BOOST)


def apply_premium_boost(result: MatchResult, features: PremiumFeatures) -> MatchResult:
    """Return a boosted copy of *result*; non-premium results pass through."""
    if not features.is_premium:
        return result

    factor = boost_factor(features)
    explanations = list(result.explanations)
    level = f"{features.level} " if features.level else ""
    percent = round_half_up((factor - 1) * 100)
    explanations.append(f"Premium {level}status applied a {percent}% boost to the match score.")
    if features.featured_profile:
        explanations.append("Profile is featured in search results and match listings.")

    return MatchResult(
        score=min(100, round_half_up(result.score * factor)),
        factors=result.factors,
        explanations=explanations,
    )


def client_reputation_score(reputation: ClientReputation | None) -> float:
    """Weighted client rating in [0, 1], shrunk toward 0.5 for few ratings."""
    if reputation is None:
        return 0.5

    weighted = sum(
        getattr(reputation, name) * weight
        for name, weight in CLIENT_REPUTATION_WEIGHTS.items()
    ) / 5
    confidence = min(1.0, max(reputation.total_ratings, 0) / CLIENT_CONFIDENCE_RATINGS)
    return 0.5 + (weighted - 0.5) * confidence


def can_access_job(job: JobRecord, specialist: SpecialistProfile) -> bool:
    features = specialist.premium
    if features and features.verified_only and not job.verified_payment:
        return False
    return True


def premium_badges(specialist: SpecialistProfile) -> list[str]:
    features = specialist.premium
    if not features or not features.is_premium:
        return []

    badges = ["premium"]
    level = (features.level or "").lower()
    if level == "pro":
        badges.append("verified")
    elif level == "elite":
        badges.extend(["verified", "top-rated"])
    return badges
