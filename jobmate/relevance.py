"""Relevance scoring for suggestions and assistant-mode prediction."""
from __future__ import annotations

from collections import Counter
from dataclasses import replace

from jobmate.models import AssistantMode, MemoryLog, Suggestion

BASE_SCORE = 50
CONTEXT_MATCH_BONUS = 30
PARTIAL_CONTEXT_BONUS = 15
ACCEPTANCE_WEIGHT = 25
PRIORITY_WEIGHT = 6
ACCEPTED = "suggestion_accepted"
# Recent logs consulted when predicting a mode
MODE_HISTORY_WINDOW = 10

PATH_MODES: tuple[tuple[str, AssistantMode], ...] = (
    ("/jobs", AssistantMode.MATCHING),
    ("/project", AssistantMode.PROJECT_SETUP),
    ("/profile", AssistantMode.PROFILE),
    ("/payment", AssistantMode.PAYMENTS),
    ("/billing", AssistantMode.PAYMENTS),
    ("/marketplace", AssistantMode.MARKETPLACE),
)


def relevance_score(suggestion: Suggestion, current_path: str, logs: list[MemoryLog]) -> int:
    score = BASE_SCORE

    ctx = suggestion.context
    if ctx and current_path:
        if ctx in current_path:
            score += CONTEXT_MATCH_BONUS
        elif any(part and part in current_path for part in ctx.split("_")):
            score += PARTIAL_CONTEXT_BONUS

    similar = [
        m for m in logs
        if (suggestion.action_url and m.action == suggestion.action_url)
        or (ctx and m.context == ctx)
    ]
    if similar:
        accepted = sum(1 for m in similar if m.interaction_type == ACCEPTED)
        score += int(accepted / len(similar) * ACCEPTANCE_WEIGHT + 0.5)

    score += int(suggestion.priority) * PRIORITY_WEIGHT
    return max(0, min(100, score))


def score_suggestions(
    suggestions: list[Suggestion], current_path: str, logs: list[MemoryLog]
) -> list[Suggestion]:
    """Copies of *suggestions* with ``relevance_score`` filled in."""
    return [
        replace(s, relevance_score=relevance_score(s, current_path, logs))
        for s in suggestions
    ]


def predict_mode(current_path: str | None, logs: list[MemoryLog]) -> AssistantMode:
    path = current_path or ""
    for fragment, mode in PATH_MODES:
        if fragment in path:
            return mode

    modes = [
        AssistantMode(m.mode.upper())
        for m in logs[:MODE_HISTORY_WINDOW]
        if m.mode and m.mode.upper() in AssistantMode.__members__
    ]
    if modes:
        return Counter(modes).most_common(1)[0][0]
    return AssistantMode.GENERAL
