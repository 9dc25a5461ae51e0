"""Log price-calculator usage in a CSV table (file-locked) and personalize estimates."""
from __future__ import annotations

import csv
import fcntl
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

from jobmate.config import DATA_DIR
from jobmate.log import get_logger
from jobmate.models import AssistantMode, PriceEstimate, PriceHistoryEntry, Priority, Suggestion
from jobmate.pricing import calculate_price_estimate

log = get_logger(__name__)

PRICE_HISTORY_CSV: Path = DATA_DIR / "price_estimates.csv"
HEADERS: list[str] = [
    "user_id", "category", "complexity", "experience",
    "region", "duration", "hours", "created_at",
]

CATEGORY_SLUGS: dict[str, str] = {
    "Web Development": "web",
    "Mobile Development": "mobile",
    "UI/UX Design": "design",
}


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def ensure_history(path: Path | None = None) -> Path:
    path = path or PRICE_HISTORY_CSV
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        with open(path, "w", newline="", encoding="utf-8") as f:
            _lock(f)
            csv.writer(f).writerow(HEADERS)
            _unlock(f)
        log.info("Created price history log → %s", path.name)
    return path


def record_estimate(
    user_id: str, estimate: PriceEstimate, path: Path | None = None
) -> PriceHistoryEntry:
    path = ensure_history(path)
    entry = PriceHistoryEntry(
        user_id=user_id,
        category=estimate.category,
        complexity=estimate.complexity,
        experience=estimate.experience,
        region=estimate.region,
        duration=estimate.duration,
        hours=estimate.hours,
        created_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
    )
    with open(path, "a", newline="", encoding="utf-8") as f:
        _lock(f)
        csv.DictWriter(f, fieldnames=HEADERS).writerow(vars(entry))
        _unlock(f)
    log.debug("Recorded estimate: %s / %s for %s", entry.category, entry.complexity, user_id)
    return entry


def get_user_history(user_id: str, path: Path | None = None) -> list[PriceHistoryEntry]:
    """A user's logged estimates, oldest first."""
    path = ensure_history(path)
    with open(path, "r", encoding="utf-8") as f:
        _lock(f, exclusive=False)
        rows = list(csv.DictReader(f))
        _unlock(f)

    entries: list[PriceHistoryEntry] = []
    for r in rows:
        if r.get("user_id") != user_id:
            continue
        try:
            hours = int(r.get("hours") or 0)
        except ValueError:
            log.warning("Skipping history row with bad hours: %r", r.get("hours"))
            continue
        entries.append(PriceHistoryEntry(
            user_id=user_id,
            category=r.get("category", ""),
            complexity=r.get("complexity", ""),
            experience=r.get("experience", ""),
            region=r.get("region", ""),
            duration=r.get("duration", ""),
            hours=hours,
            created_at=r.get("created_at", ""),
        ))
    return entries


def _most_common(values: list) -> object:
    # Counter keeps first-seen order among equal counts
    return Counter(values).most_common(1)[0][0]


def _calculator_url(category: str) -> str:
    slug = CATEGORY_SLUGS.get(category)
    return f"/project/price-calculator?category={slug}" if slug else "/project/price-calculator"


def personalized_estimates(user_id: str, history: list[PriceHistoryEntry]) -> list[Suggestion]:
    """High-priority estimate suggestions built from a user's past usage."""
    if not history:
        return []

    estimate = calculate_price_estimate(
        _most_common([h.category for h in history]),
        _most_common([h.complexity for h in history]),
        _most_common([h.experience for h in history]),
        _most_common([h.region for h in history]),
        _most_common([h.duration for h in history]),
        _most_common([h.hours for h in history]),
    )
    suggestions = [
        Suggestion(
            user_id=user_id,
            mode=AssistantMode.PROJECT_SETUP,
            context="personalized_pricing",
            title=f"Your usual {estimate.category} estimate",
            content=(
                f"Based on your previous estimates, {estimate.complexity.lower()} "
                f"{estimate.category} work typically costs "
                f"${estimate.total_min}-{estimate.total_max} "
                f"(${estimate.hourly_min}-{estimate.hourly_max}/hour)."
            ),
            priority=Priority.HIGH,
            action_url=_calculator_url(estimate.category),
        )
    ]

    latest = history[-1]
    if latest.category != estimate.category:
        recent = calculate_price_estimate(
            latest.category, latest.complexity, latest.experience,
            latest.region, latest.duration, latest.hours,
        )
        suggestions.append(Suggestion(
            user_id=user_id,
            mode=AssistantMode.PROJECT_SETUP,
            context="personalized_pricing",
            title=f"Recent {recent.category} estimate",
            content=(
                f"Your latest {recent.category} estimate came to "
                f"${recent.total_min}-{recent.total_max} for {recent.hours} hours."
            ),
            priority=Priority.HIGH,
            action_url=_calculator_url(recent.category),
        ))
    return suggestions
