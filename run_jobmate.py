#!/usr/bin/env python3
"""Command-line entry point: price estimates, job matching, suggestions and insights."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobmate.config import ensure_dirs, load_settings
from jobmate.log import configure, get_logger

log = get_logger(__name__)


def _estimate(args: argparse.Namespace, settings: dict) -> int:
    from jobmate.price_history import record_estimate
    from jobmate.pricing import estimate_from_query

    estimate = estimate_from_query(args.query, default_hours=settings["pricing"]["default_hours"])
    print(estimate.explanation)
    if args.user:
        ensure_dirs()
        record_estimate(args.user, estimate)
    return 0


def _match(args: argparse.Namespace, settings: dict) -> int:
    from jobmate.matcher import filter_and_rank
    from jobmate.report import build_match_report, write_report
    from jobmate.store import InMemoryStore

    store = InMemoryStore.from_yaml(args.fixture)
    specialist = next((s for s in store.specialists if s.id == args.specialist), None)
    if specialist is None:
        log.error("Specialist %s not found in %s", args.specialist, args.fixture.name)
        return 1

    matching = settings["matching"]
    min_score = args.min_score if args.min_score is not None else matching["min_score"]
    matches = filter_and_rank(
        store.jobs,
        specialist,
        min_score,
        default_radius_km=float(matching["max_distance_km"]),
        min_completed_jobs=int(matching["reputation_min_jobs"]),
    )
    content = build_match_report(specialist, matches)
    print(content)
    if args.write_report:
        write_report(content, name=f"matches_{specialist.id}")
    return 0


def _suggest(args: argparse.Namespace, settings: dict) -> int:
    from jobmate import price_history
    from jobmate.suggestion_engine import generate_suggestions
    from jobmate.store import InMemoryStore

    matching = settings["matching"]
    history = price_history.PRICE_HISTORY_CSV
    store = InMemoryStore.from_yaml(
        args.fixture,
        min_score=matching["min_score"],
        default_radius_km=float(matching["max_distance_km"]),
        min_completed_jobs=int(matching["reputation_min_jobs"]),
        # estimates recorded by `estimate --user`
        history_path=history if history.exists() else None,
    )
    suggestions = generate_suggestions(
        args.user,
        args.mode,
        args.context,
        store=store,
        current_path=args.path,
        settings=settings,
    )
    if not suggestions:
        print("No suggestions.")
    for s in suggestions:
        relevance = f" relevance={s.relevance_score}" if s.relevance_score is not None else ""
        link = f" → {s.action_url}" if s.action_url else ""
        print(f"[P{int(s.priority)}{relevance}] {s.title}: {s.content}{link}")
    return 0


def _insights(args: argparse.Namespace, settings: dict) -> int:
    from jobmate.compatibility import (
        generate_ai_insights,
        generate_compatibility_insights,
        get_personalized_recommendations,
    )
    from jobmate.store import InMemoryStore

    store = InMemoryStore.from_yaml(args.fixture)
    prefs = store.listing_preferences.get(args.user)
    if prefs is None:
        log.error("No listing preferences for user %s", args.user)
        return 1

    for insight in generate_compatibility_insights(prefs, store.listings):
        print(f"## {insight.title}")
        for s in insight.listings:
            print(f"- {s.listing.title} ({s.result.overall_score}%): {s.result.primary_match_reason}")
        print()

    ranked = get_personalized_recommendations(prefs, store.listings, len(store.listings))
    for line in generate_ai_insights(
        prefs, [s.result for s in ranked], store.listings, settings=settings
    ):
        print(f"* {line}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run_jobmate", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("estimate", help="Price estimate from a free-text request")
    p.add_argument("query")
    p.add_argument("--user", help="Record the estimate in this user's price history")
    p.set_defaults(func=_estimate)

    p = sub.add_parser("match", help="Rank a fixture's jobs for one specialist")
    p.add_argument("fixture", type=Path)
    p.add_argument("--specialist", required=True)
    p.add_argument("--min-score", type=int)
    p.add_argument("--write-report", action="store_true")
    p.set_defaults(func=_match)

    p = sub.add_parser("suggest", help="Assistant suggestions for one user")
    p.add_argument("fixture", type=Path)
    p.add_argument("--user", required=True)
    p.add_argument("--mode", help="MATCHING, PROJECT_SETUP, PROFILE, PAYMENTS, MARKETPLACE or GENERAL")
    p.add_argument("--context")
    p.add_argument("--path", help="Current page path; enables relevance ranking")
    p.set_defaults(func=_suggest)

    p = sub.add_parser("insights", help="Compatibility insights over a fixture's listings")
    p.add_argument("fixture", type=Path)
    p.add_argument("--user", required=True)
    p.set_defaults(func=_insights)

    return parser


if __name__ == "__main__":
    args = build_parser().parse_args()
    # .env is loaded after the first logger is created; re-read LOG_LEVEL
    configure("DEBUG" if args.verbose else None)
    sys.exit(args.func(args, load_settings()))
