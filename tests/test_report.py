from __future__ import annotations

import dataclasses

from jobmate import report
from jobmate.matcher import filter_and_rank
from jobmate.models import PremiumFeatures
from jobmate.report import build_match_report, write_report


def test_report_lists_matches(job, specialist):
    specialist = dataclasses.replace(
        specialist, premium=PremiumFeatures(is_premium=True, level="pro")
    )
    matches = filter_and_rank([job], specialist)
    content = build_match_report(specialist, matches)

    assert content.startswith("# Job Matches for Dana Reyes (")
    assert "_Badges: premium, verified_" in content
    assert "**1** matching jobs" in content
    assert f"### React storefront ({matches[0].result.score}%)" in content
    assert "- **Budget:** $40-80" in content
    assert "- **Urgency:** high" in content
    assert "## Factor Breakdown" in content
    assert "| # | Job | Score | Skills | Location | Price | Reputation | Availability |" in content


def test_report_without_matches(specialist):
    content = build_match_report(specialist, [])
    assert "No open jobs scored above the threshold." in content
    assert "## Top Matches" not in content
    assert "_Badges" not in content


def test_report_open_ended_budget(job, specialist):
    job = dataclasses.replace(job, budget_max=None)
    content = build_match_report(specialist, filter_and_rank([job], specialist))
    assert "- **Budget:** $40+" in content


def test_write_report(tmp_path, monkeypatch):
    monkeypatch.setattr(report, "REPORTS_DIR", tmp_path / "reports")
    path = write_report("# hello", name="matches_sp-1")
    assert path.parent == tmp_path / "reports"
    assert path.name.startswith("matches_sp-1_")
    assert path.read_text() == "# hello"
