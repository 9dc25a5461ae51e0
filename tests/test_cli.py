from __future__ import annotations

import pytest

import run_jobmate
from jobmate.config import CONFIG_DIR

SAMPLE_FIXTURE = CONFIG_DIR / "sample_marketplace.yaml"


def _run(argv, settings):
    args = run_jobmate.build_parser().parse_args(argv)
    return args.func(args, settings)


def test_estimate_prints_explanation(capsys, settings):
    assert _run(["estimate", "3 weeks of enterprise web development"], settings) == 0
    out = capsys.readouterr().out
    assert "- Enterprise complexity (" in out
    assert "$8640-36960" in out


def test_estimate_records_history(tmp_path, monkeypatch, settings):
    from jobmate import price_history

    path = tmp_path / "history.csv"
    monkeypatch.setattr(price_history, "PRICE_HISTORY_CSV", path)
    monkeypatch.setattr(run_jobmate, "ensure_dirs", lambda: None)
    _run(["estimate", "logo design", "--user", "u-9"], settings)
    assert [h.category for h in price_history.get_user_history("u-9", path)] == ["Graphic Design"]


def test_match_prints_report(capsys, settings):
    assert _run(["match", str(SAMPLE_FIXTURE), "--specialist", "sp-1"], settings) == 0
    out = capsys.readouterr().out
    assert "# Job Matches for Dana Reyes" in out
    assert "React storefront rebuild" in out


def test_match_unknown_specialist(settings):
    assert _run(["match", str(SAMPLE_FIXTURE), "--specialist", "nobody"], settings) == 1


def test_suggest(capsys, settings):
    _run(["suggest", str(SAMPLE_FIXTURE), "--user", "u-specialist", "--mode", "PAYMENTS"], settings)
    out = capsys.readouterr().out
    assert "Pending payments" in out


def test_suggest_reads_recorded_estimates(tmp_path, monkeypatch, capsys, settings):
    from jobmate import price_history

    monkeypatch.setattr(price_history, "PRICE_HISTORY_CSV", tmp_path / "history.csv")
    monkeypatch.setattr(run_jobmate, "ensure_dirs", lambda: None)
    argv = ["suggest", str(SAMPLE_FIXTURE), "--user", "u-specialist",
            "--mode", "PROJECT_SETUP", "--context", "pricing"]

    _run(argv, settings)
    assert "Your usual" not in capsys.readouterr().out

    _run(["estimate", "logo design", "--user", "u-specialist"], settings)
    capsys.readouterr()
    _run(argv, settings)
    assert "Your usual Graphic Design estimate" in capsys.readouterr().out


def test_insights(capsys, settings, monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    assert _run(["insights", str(SAMPLE_FIXTURE), "--user", "u-customer"], settings) == 0
    out = capsys.readouterr().out
    assert "## Top Matches For You" in out
    assert "## Best Web Development For You" in out


def test_insights_without_preferences(settings):
    assert _run(["insights", str(SAMPLE_FIXTURE), "--user", "u-specialist"], settings) == 1


def test_command_is_required():
    with pytest.raises(SystemExit):
        run_jobmate.build_parser().parse_args([])
