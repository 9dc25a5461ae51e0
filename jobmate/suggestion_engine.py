"""Rule-based assistant suggestions: dispatch by mode, then filter by proactivity.

A user or preference lookup failure never reaches the caller: the batch
degrades to an empty list (user) or the default proactivity level
(preferences). Each handler runs in isolation, so one failing handler
drops only its own suggestions.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from jobmate.config import load_settings
from jobmate.log import get_logger
from jobmate.models import AssistantMode, MemoryLog, Suggestion, as_utc
from jobmate.relevance import predict_mode, score_suggestions
from jobmate.store import DataStore
from jobmate.suggestions import get_handlers

log = get_logger(__name__)

PROACTIVITY_LEVELS = (1, 2, 3)


def filter_by_proactivity(suggestions: list[Suggestion], level: int) -> list[Suggestion]:
    """1 keeps high priority only, 2 keeps medium and high, 3 keeps everything."""
    if level == 1:
        return [s for s in suggestions if s.priority == 3]
    if level == 2:
        return [s for s in suggestions if s.priority >= 2]
    return list(suggestions)


def _memory_logs(store: DataStore, user_id: str, limit: int) -> list[MemoryLog]:
    try:
        return store.get_memory_logs(user_id, limit=limit)
    except Exception as exc:
        log.warning("Memory logs unavailable for %s: %s", user_id, exc)
        return []


def generate_suggestions(
    user_id: str,
    mode: AssistantMode | str | None = None,
    context: str | None = None,
    *,
    store: DataStore,
    current_path: str | None = None,
    settings: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> list[Suggestion]:
    settings = settings or load_settings()
    assistant = settings["assistant"]
    now = as_utc(now) or datetime.now(timezone.utc)

    try:
        user = store.get_user(user_id)
    except Exception as exc:
        log.error("[get_user] FAILED for %s: %s", user_id, exc)
        return []
    if user is None:
        log.warning("User %s not found, no suggestions", user_id)
        return []

    level = int(assistant["default_proactivity"])
    try:
        prefs = store.get_preferences(user_id)
    except Exception as exc:
        log.warning("Assistant preferences unavailable for %s (%s), using level %d", user_id, exc, level)
        prefs = None
    if prefs is not None:
        if not prefs.is_enabled:
            log.debug("Assistant disabled for %s", user_id)
            return []
        if prefs.proactivity_level in PROACTIVITY_LEVELS:
            level = prefs.proactivity_level

    logs: list[MemoryLog] | None = None
    if mode is None:
        logs = _memory_logs(store, user_id, int(assistant["memory_log_limit"]))
        resolved = predict_mode(current_path, logs)
        log.debug("Predicted mode %s for %s", resolved.value, user_id)
    else:
        resolved = AssistantMode.parse(mode)

    suggestions: list[Suggestion] = []
    for handler in get_handlers(resolved, settings):
        try:
            suggestions.extend(handler.generate(user, store, context, now))
        except Exception as exc:
            log.error("[%s] FAILED: %s", handler.name, exc)

    filtered = filter_by_proactivity(suggestions, level)
    log.info(
        "%s/%s: %d suggestions, %d kept at proactivity %d",
        user_id, resolved.value, len(suggestions), len(filtered), level,
    )
    if current_path is None:
        return filtered

    if logs is None:
        logs = _memory_logs(store, user_id, int(assistant["memory_log_limit"]))
    scored = sorted(
        score_suggestions(filtered, current_path, logs),
        key=lambda s: -(s.relevance_score or 0),
    )
    limit = assistant["relevance_limits"].get(level, len(scored))
    return scored[:limit]
