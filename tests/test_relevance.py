from __future__ import annotations

import pytest

from jobmate.models import AssistantMode, MemoryLog, Suggestion
from jobmate.relevance import predict_mode, relevance_score, score_suggestions


def _suggestion(context: str, priority: int = 3, action_url: str | None = None) -> Suggestion:
    return Suggestion("u-1", AssistantMode.PAYMENTS, context, "t", "c", priority, action_url)


def test_base_score_with_priority():
    assert relevance_score(_suggestion("onboarding", 1), "/dashboard", []) == 56


def test_full_context_match():
    assert relevance_score(_suggestion("payment_setup"), "/settings/payment_setup", []) == 98


def test_partial_context_match():
    assert relevance_score(_suggestion("payment_setup"), "/payments", []) == 83


def test_acceptance_rate_of_similar_interactions():
    logs = [
        MemoryLog(action="/payments/methods", interaction_type="suggestion_accepted"),
        MemoryLog(context="payment_setup", interaction_type="suggestion_dismissed"),
        MemoryLog(context="other", interaction_type="suggestion_accepted"),
    ]
    s = _suggestion("payment_setup", 1, "/payments/methods")
    # 50 + half of 25 rounded up + 6
    assert relevance_score(s, "/dashboard", logs) == 69


def test_score_is_capped():
    logs = [MemoryLog(context="payment_setup", interaction_type="suggestion_accepted")]
    assert relevance_score(_suggestion("payment_setup"), "/payment_setup", logs) == 100


def test_score_suggestions_returns_copies():
    original = _suggestion("payment_setup")
    [scored] = score_suggestions([original], "/payments", [])
    assert scored.relevance_score == 83
    assert original.relevance_score is None


@pytest.mark.parametrize("path,mode", [
    ("/jobs/42", AssistantMode.MATCHING),
    ("/project/new", AssistantMode.PROJECT_SETUP),
    ("/profile/skills", AssistantMode.PROFILE),
    ("/payments", AssistantMode.PAYMENTS),
    ("/billing/history", AssistantMode.PAYMENTS),
    ("/marketplace", AssistantMode.MARKETPLACE),
])
def test_predict_mode_from_path(path, mode):
    logs = [MemoryLog(mode="PROFILE")]
    assert predict_mode(path, logs) == mode


def test_predict_mode_most_frequent_logged_mode():
    logs = [MemoryLog(mode=m) for m in ("PROFILE", "PAYMENTS", "PAYMENTS", None, "bogus")]
    assert predict_mode("/dashboard", logs) == AssistantMode.PAYMENTS


def test_predict_mode_ties_go_to_first_seen():
    logs = [MemoryLog(mode=m) for m in ("MARKETPLACE", "PROFILE", "PROFILE", "MARKETPLACE")]
    assert predict_mode(None, logs) == AssistantMode.MARKETPLACE


def test_predict_mode_only_recent_window():
    logs = [MemoryLog(mode="PROFILE")] * 10 + [MemoryLog(mode="PAYMENTS")] * 20
    assert predict_mode(None, logs) == AssistantMode.PROFILE


def test_predict_mode_default():
    assert predict_mode(None, []) == AssistantMode.GENERAL
