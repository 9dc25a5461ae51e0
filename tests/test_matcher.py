from __future__ import annotations

import dataclasses

import pytest

from jobmate.matcher import (
    aggregate,
    availability_match,
    filter_and_rank,
    haversine_km,
    location_proximity,
    price_match,
    range_overlap,
    reputation_score,
    score_match,
    skill_match,
)
from jobmate.models import (
    Coordinates,
    JobStatus,
    MatchFactors,
    PremiumFeatures,
    TimeSlot,
    Urgency,
)
from jobmate.weights import round_half_up


# ── skill_match ──────────────────────────────────────────────────────────


def test_skill_match_no_required_skills_is_full():
    assert skill_match([], ["python"]) == 1.0


def test_skill_match_subset_is_full():
    assert skill_match(["React", " css "], ["react", "CSS", "html"]) == 1.0


def test_skill_match_partial():
    assert skill_match(["react", "go"], ["react"]) == 0.5


def test_skill_match_duplicates_count_once():
    assert skill_match(["react", "React", "go"], ["react"]) == 0.5


@pytest.mark.parametrize("required,skills", [
    (["a", "b", "c"], []),
    (["a"], ["a", "b"]),
    (["x", "y"], ["y", "z"]),
])
def test_skill_match_in_unit_interval(required, skills):
    assert 0.0 <= skill_match(required, skills) <= 1.0


# ── location_proximity ───────────────────────────────────────────────────


def test_haversine_zero_for_same_point():
    p = Coordinates(51.5, -0.12)
    assert haversine_km(p, p) == 0.0


def test_haversine_one_degree_of_latitude():
    assert haversine_km(Coordinates(0, 0), Coordinates(1, 0)) == pytest.approx(111.19, abs=0.01)


def test_location_zero_at_exact_radius():
    a, b = Coordinates(40.0, -74.0), Coordinates(40.1, -74.0)
    radius = haversine_km(a, b)
    assert location_proximity(a, b, radius) == 0.0


def test_location_zero_beyond_radius():
    a, b = Coordinates(40.0, -74.0), Coordinates(41.0, -74.0)
    assert location_proximity(a, b, 10) == 0.0


def test_location_full_at_same_point():
    p = Coordinates(40.0, -74.0)
    assert location_proximity(p, p, 10) == 1.0


def test_location_missing_coordinates_is_neutral():
    assert location_proximity(None, Coordinates(1, 1), 10) == 0.5
    assert location_proximity(Coordinates(1, 1), None, 10) == 0.5


@pytest.mark.parametrize("radius", [None, 0, -5])
def test_location_falls_back_to_default_radius(radius):
    a, b = Coordinates(40.0, -74.0), Coordinates(40.1, -74.0)
    d = haversine_km(a, b)
    assert location_proximity(a, b, radius, default_radius_km=50) == pytest.approx(1 - d / 50)


# ── price_match ──────────────────────────────────────────────────────────


def test_range_overlap_relative_to_narrower():
    assert range_overlap((40, 80), (50, 90)) == pytest.approx(0.75)


def test_range_overlap_disjoint():
    assert range_overlap((10, 20), (30, 40)) == 0.0


def test_range_overlap_point_inside():
    assert range_overlap((10, 20), (15, 15)) == 1.0


def test_price_match_overlap(job, specialist):
    assert price_match(job, specialist) == pytest.approx(0.75)


def test_price_match_unspecified_budget_is_full(job, specialist):
    job = dataclasses.replace(job, budget_min=None, budget_max=None)
    assert price_match(job, specialist) == 1.0


def test_price_match_unspecified_rates_is_full(job, specialist):
    specialist = dataclasses.replace(specialist, hourly_rate_min=None, hourly_rate_max=None)
    assert price_match(job, specialist) == 1.0


def test_price_match_preferred_rate_as_point(job, specialist):
    specialist = dataclasses.replace(
        specialist, hourly_rate_min=None, hourly_rate_max=None, preferred_rate=60
    )
    assert price_match(job, specialist) == 1.0


def test_price_match_inverted_budget_is_swapped(job, specialist):
    job = dataclasses.replace(job, budget_min=80, budget_max=40)
    assert price_match(job, specialist) == pytest.approx(0.75)


def test_price_match_min_only_budget_is_open_ended(job, specialist):
    job = dataclasses.replace(job, budget_min=100, budget_max=None)
    assert price_match(job, specialist) == 0.0


def test_price_match_max_only_budget_starts_at_zero(job, specialist):
    job = dataclasses.replace(job, budget_min=None, budget_max=60)
    # overlap 50..60 over the narrower 50..90 range
    assert price_match(job, specialist) == pytest.approx(0.25)


# ── reputation_score ─────────────────────────────────────────────────────


def test_reputation_missing_rating_is_neutral(specialist):
    assert reputation_score(dataclasses.replace(specialist, rating=None)) == 0.5


def test_reputation_experienced_specialist(specialist):
    specialist = dataclasses.replace(specialist, rating=5.0, completed_jobs=12)
    assert reputation_score(specialist) == 1.0


def test_reputation_shrinks_toward_neutral_with_few_jobs(specialist):
    specialist = dataclasses.replace(specialist, rating=5.0, completed_jobs=5)
    assert reputation_score(specialist) == pytest.approx(0.75)


def test_reputation_no_jobs_is_neutral(specialist):
    specialist = dataclasses.replace(specialist, rating=1.0, completed_jobs=0)
    assert reputation_score(specialist) == 0.5


# ── availability_match ───────────────────────────────────────────────────


def test_availability_all_slots_covered(job, specialist):
    assert availability_match(job, specialist) == 1.0


def test_availability_no_requested_slots(job, specialist):
    job = dataclasses.replace(job, requested_slots=[])
    assert availability_match(job, specialist) == 1.0


def test_availability_unknown_availability_is_neutral(job, specialist):
    specialist = dataclasses.replace(specialist, availability={})
    assert availability_match(job, specialist) == 0.5


def test_availability_partial_coverage(job, specialist):
    job = dataclasses.replace(
        job, requested_slots=[TimeSlot("monday", "morning"), TimeSlot("friday", "evening")]
    )
    assert availability_match(job, specialist) == 0.5


def test_availability_slow_response_on_urgent_job(job, specialist):
    specialist = dataclasses.replace(specialist, response_time_minutes=120)
    assert availability_match(job, specialist) == pytest.approx(0.5)


def test_availability_slow_response_fine_for_low_urgency(job, specialist):
    job = dataclasses.replace(job, urgency=Urgency.LOW)
    specialist = dataclasses.replace(specialist, response_time_minutes=120)
    assert availability_match(job, specialist) == 1.0


# ── aggregation ──────────────────────────────────────────────────────────


def test_aggregate_bounds():
    assert aggregate(MatchFactors(1, 1, 1, 1, 1)) == 100
    assert aggregate(MatchFactors(0, 0, 0, 0, 0)) == 0


def test_aggregate_weights_skills_most():
    assert aggregate(MatchFactors(1, 0, 0, 0, 0)) == 30


def test_aggregate_rounds_half_up():
    # 30 + 20 + 15 + 7.5 + 20 = 92.5
    assert aggregate(MatchFactors(1, 1, 1, 0.5, 1)) == 93


def test_score_match_is_deterministic(job, specialist):
    assert score_match(job, specialist) == score_match(job, specialist)


def test_score_match_explanations(job, specialist):
    result = score_match(job, specialist)
    assert "Strong skills match for Web Development" in result.explanations
    assert "Quick response time for an urgent job" in result.explanations
    assert any("km from job location" in e or "job location (" in e for e in result.explanations)


# ── filter_and_rank ──────────────────────────────────────────────────────


def test_filter_and_rank_skips_closed_jobs(job, specialist):
    closed = dataclasses.replace(job, id="job-2", status=JobStatus.COMPLETED)
    ranked = filter_and_rank([job, closed], specialist)
    assert [m.job.id for m in ranked] == ["job-1"]


def test_filter_and_rank_sorted_descending(job, specialist):
    far = dataclasses.replace(job, id="far", location=Coordinates(34.05, -118.24))
    unskilled = dataclasses.replace(job, id="unskilled", required_skills=["cobol"])
    ranked = filter_and_rank([far, unskilled, job], specialist, min_score=0)
    scores = [m.result.score for m in ranked]
    assert scores == sorted(scores, reverse=True)
    assert ranked[0].job.id == "job-1"


def test_filter_and_rank_drops_below_min_score(job, specialist):
    assert filter_and_rank([job], specialist, min_score=101) == []


def test_filter_and_rank_respects_verified_only(job, specialist):
    specialist = dataclasses.replace(
        specialist, premium=PremiumFeatures(is_premium=True, verified_only=True)
    )
    assert filter_and_rank([job], specialist, min_score=0) == []
    verified = dataclasses.replace(job, verified_payment=True)
    assert len(filter_and_rank([verified], specialist, min_score=0)) == 1


def test_filter_and_rank_applies_premium_boost(job, specialist):
    job = dataclasses.replace(job, required_skills=["react", "go"])
    base = filter_and_rank([job], specialist, min_score=0)[0].result.score
    premium = dataclasses.replace(
        specialist, premium=PremiumFeatures(is_premium=True, level="elite")
    )
    boosted = filter_and_rank([job], premium, min_score=0)[0].result
    assert boosted.score == min(100, round_half_up(base * 1.15))
    assert boosted.explanations[-1].startswith("Premium elite status applied a 15% boost")
