"""Compatibility of marketplace listings with a user's preferences, and insights built on it."""
from __future__ import annotations

import math
from collections import defaultdict
from typing import Any

from jobmate import weights
from jobmate.config import get_env, load_settings
from jobmate.log import get_logger
from jobmate.matcher import haversine_km
from jobmate.models import (
    CompatibilityDimension,
    CompatibilityInsight,
    CompatibilityResult,
    Listing,
    ScoredListing,
    UserPreferences,
)
from jobmate.retry import retry

log = get_logger(__name__)

REQUIREMENTS = "Requirements"
LOCATION = "Location"
PRICE = "Price"
REPUTATION = "Reputation"

# Listing dimensions share the job-matching weights; requirements stands in for skills
DIMENSION_WEIGHT_KEYS: dict[str, str] = {
    REQUIREMENTS: weights.SKILLS,
    LOCATION: weights.LOCATION,
    PRICE: weights.PRICE,
    REPUTATION: weights.REPUTATION,
}

NEUTRAL_SCORE = 50
STRONG_DIMENSION = 70
WEAK_DIMENSION = 50
MAX_IMPROVEMENTS = 3
TOP_MATCHES = 5
CATEGORY_MATCHES = 3

FALLBACK_INSIGHTS: tuple[str, ...] = (
    "Based on your preferences, you might enjoy exploring more listings in your favorite categories.",
    "Your compatibility scores are highest with listings that match your location and price preferences.",
)


# ── Dimension scores (0-100) ─────────────────────────────────────────────


def requirements_score(prefs: UserPreferences, listing: Listing) -> int:
    keywords = {k.lower().strip() for k in prefs.desired_keywords if k.strip()}
    if not keywords:
        return 100
    haystack = " ".join([*listing.requirements, listing.title, listing.description]).lower()
    found = sum(1 for k in keywords if k in haystack)
    return weights.round_half_up(found / len(keywords) * 100)


def location_score(prefs: UserPreferences, listing: Listing) -> int:
    if prefs.location is None or listing.location is None or prefs.max_distance_km <= 0:
        return NEUTRAL_SCORE
    distance = haversine_km(prefs.location, listing.location)
    if distance <= prefs.max_distance_km:
        return 100
    excess = (distance - prefs.max_distance_km) / prefs.max_distance_km
    return max(0, weights.round_half_up((1 - excess) * 100))


def price_score(prefs: UserPreferences, listing: Listing) -> int:
    if listing.price is None or (prefs.min_price is None and prefs.max_price is None):
        return NEUTRAL_SCORE
    low = prefs.min_price if prefs.min_price is not None else 0.0
    high = prefs.max_price if prefs.max_price is not None else math.inf
    price = listing.price

    if low <= price <= high:
        return 100
    if price < low:
        # Cheaper than wanted: penalised by the relative shortfall
        return max(0, weights.round_half_up((1 - (low - price) / low) * 100)) if low > 0 else 0
    if high <= 0:
        return 0
    # Over budget: half the relative excess
    return max(0, weights.round_half_up((1 - (price - high) / high * 0.5) * 100))


def reputation_score(listing: Listing) -> int:
    if listing.rating is None:
        return NEUTRAL_SCORE
    return weights.round_half_up(min(max(listing.rating, 0.0), 5.0) / 5 * 100)


def _primary_reason(dimensions: list[CompatibilityDimension]) -> str:
    strong = sorted(
        (d for d in dimensions if d.score >= STRONG_DIMENSION), key=lambda d: -d.score
    )
    if strong:
        return f"Strong match on {strong[0].name.lower()}."
    return "Moderate overall compatibility."


def _improvements(dimensions: list[CompatibilityDimension]) -> list[str]:
    weak = sorted((d for d in dimensions if d.score < WEAK_DIMENSION), key=lambda d: d.score)
    return [
        f"Improve your {d.name.lower()} match by updating your preferences."
        for d in weak[:MAX_IMPROVEMENTS]
    ]


def score_listing(prefs: UserPreferences, listing: Listing) -> CompatibilityResult:
    w = weights.normalized(DIMENSION_WEIGHT_KEYS.values())
    dimensions = [
        CompatibilityDimension(
            REQUIREMENTS, requirements_score(prefs, listing), w[weights.SKILLS],
            "How many of your desired keywords the listing mentions",
        ),
        CompatibilityDimension(
            LOCATION, location_score(prefs, listing), w[weights.LOCATION],
            "How close the listing is to your preferred location",
        ),
        CompatibilityDimension(
            PRICE, price_score(prefs, listing), w[weights.PRICE],
            "How well the price matches your budget",
        ),
        CompatibilityDimension(
            REPUTATION, reputation_score(listing), w[weights.REPUTATION],
            "How well the listing is rated",
        ),
    ]
    overall = weights.round_half_up(sum(d.score * d.weight for d in dimensions))
    return CompatibilityResult(
        user_id=prefs.user_id,
        listing_id=listing.id,
        category=listing.category,
        overall_score=max(0, min(100, overall)),
        dimensions=dimensions,
        primary_match_reason=_primary_reason(dimensions),
        improvement_suggestions=_improvements(dimensions),
    )


# ── Recommendations and insights ─────────────────────────────────────────


def get_personalized_recommendations(
    prefs: UserPreferences, listings: list[Listing], limit: int = TOP_MATCHES
) -> list[ScoredListing]:
    scored: list[ScoredListing] = []
    for listing in listings:
        try:
            scored.append(ScoredListing(listing, score_listing(prefs, listing)))
        except Exception as exc:
            log.error("[%s] FAILED: %s", listing.id, exc)
    scored.sort(key=lambda s: -s.result.overall_score)
    return scored[:limit]


def _display_category(category: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in category.split())


def generate_compatibility_insights(
    prefs: UserPreferences, listings: list[Listing]
) -> list[CompatibilityInsight]:
    insights: list[CompatibilityInsight] = []

    top = get_personalized_recommendations(prefs, listings, TOP_MATCHES)
    if top:
        insights.append(CompatibilityInsight(
            title="Top Matches For You",
            description="Listings with the highest compatibility to your preferences",
            category="all",
            listings=top,
        ))

    by_category: dict[str, list[Listing]] = defaultdict(list)
    for listing in listings:
        by_category[listing.category].append(listing)

    preferred = {c.lower() for c in prefs.preferred_categories}
    for category, group in by_category.items():
        if category.lower() not in preferred:
            continue
        best = get_personalized_recommendations(prefs, group, CATEGORY_MATCHES)
        if best:
            name = _display_category(category)
            insights.append(CompatibilityInsight(
                title=f"Best {name} For You",
                description=f"{name} listings that match your preferences",
                category=category,
                listings=best,
            ))

    log.info("Built %d compatibility insights from %d listings", len(insights), len(listings))
    return insights


def _average(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _top_categories(results: list[CompatibilityResult], n: int = 3) -> list[tuple[str, float]]:
    by_category: dict[str, list[float]] = defaultdict(list)
    for r in results:
        by_category[r.category].append(r.overall_score)
    ranked = sorted(
        ((c, _average(scores)) for c, scores in by_category.items()), key=lambda x: -x[1]
    )
    return ranked[:n]


def _dimension_averages(results: list[CompatibilityResult]) -> dict[str, float]:
    by_name: dict[str, list[float]] = defaultdict(list)
    for r in results:
        for d in r.dimensions:
            by_name[d.name].append(d.score)
    return {name: _average(scores) for name, scores in by_name.items()}


def _template_insights(results: list[CompatibilityResult], listings: list[Listing]) -> list[str]:
    if not results:
        return list(FALLBACK_INSIGHTS)

    insights: list[str] = []
    top = _top_categories(results)
    if top:
        category, avg = top[0]
        insights.append(
            f"Your strongest matches are in {_display_category(category)} "
            f"(average compatibility {avg:.0f}%)."
        )

    dims = _dimension_averages(results)
    if dims:
        best = max(dims, key=lambda k: dims[k])
        worst = min(dims, key=lambda k: dims[k])
        insights.append(f"Listings score highest on {best.lower()} ({dims[best]:.0f}/100 on average).")
        if worst != best and dims[worst] < WEAK_DIMENSION:
            insights.append(
                f"{worst} is your weakest dimension ({dims[worst]:.0f}/100); "
                "adjusting those preferences could surface more matches."
            )

    overall = _average([r.overall_score for r in results])
    insights.append(f"Across {len(listings)} listings your average compatibility is {overall:.0f}%.")
    return insights


@retry(max_attempts=2, base_delay=2.0, retryable=(Exception,))
def _call_groq(api_key: str, model: str, prompt: str) -> str:
    from openai import OpenAI

    client = OpenAI(api_key=api_key, base_url="https://api.groq.com/openai/v1")
    r = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=300,
    )
    return (r.choices[0].message.content or "").strip()


def _parse_lines(text: str) -> list[str]:
    lines = [line.strip().lstrip("-*•0123456789. ").strip() for line in text.splitlines()]
    return [line for line in lines if line]


def generate_ai_insights(
    prefs: UserPreferences,
    results: list[CompatibilityResult],
    listings: list[Listing],
    *,
    settings: dict[str, Any] | None = None,
) -> list[str]:
    """Short natural-language observations about a user's compatibility results."""
    api_key = get_env("GROQ_API_KEY")
    if not api_key or not results:
        if not api_key:
            log.debug("No GROQ_API_KEY, using template insights")
        return _template_insights(results, listings)

    settings = settings or load_settings()
    model = get_env("GROQ_LLM_MODEL") or settings["llm"]["model"]
    dims = _dimension_averages(results)
    prompt = f"""Write 2-3 short insights (one per line, no numbering) for a marketplace user.
Preferred categories: {', '.join(prefs.preferred_categories) or 'none'}
Listings considered: {len(listings)}
Top categories by compatibility: {', '.join(c for c, _ in _top_categories(results)) or 'none'}
Average dimension scores (0-100): {', '.join(f'{k} {v:.0f}' for k, v in dims.items())}
Average overall compatibility: {_average([r.overall_score for r in results]):.0f}%

Be specific and practical. Do not invent listings."""

    try:
        lines = _parse_lines(_call_groq(api_key, model, prompt))
        if lines:
            log.info("AI insights generated (%d)", len(lines))
            return lines
        log.warning("LLM returned no insights, using templates")
    except Exception as exc:
        log.warning("AI insight generation failed (%s), using templates", exc)
    return _template_insights(results, listings)
