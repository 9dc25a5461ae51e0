from __future__ import annotations

from jobmate.config import DEFAULT_SETTINGS, get_env, load_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "nope.yaml") == DEFAULT_SETTINGS


def test_defaults_are_not_shared(tmp_path):
    settings = load_settings(tmp_path / "nope.yaml")
    settings["matching"]["min_score"] = 99
    assert DEFAULT_SETTINGS["matching"]["min_score"] == 20


def test_overrides_merge_into_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "matching:\n"
        "  min_score: 35\n"
        "assistant:\n"
        "  relevance_limits:\n"
        "    '1': 3\n"
    )
    settings = load_settings(path)
    assert settings["matching"]["min_score"] == 35
    assert settings["matching"]["max_distance_km"] == 50
    assert settings["assistant"]["relevance_limits"] == {1: 3, 2: 4, 3: 6}
    assert settings["pricing"]["default_hours"] == 40


def test_non_mapping_file_is_ignored(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- a\n- b\n")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_shipped_settings_load():
    settings = load_settings()
    assert settings["assistant"]["relevance_limits"] == {1: 2, 2: 4, 3: 6}
    assert settings["llm"]["model"]


def test_get_env_strips(monkeypatch):
    monkeypatch.setenv("JOBMATE_TEST_VALUE", "  spaced  ")
    assert get_env("JOBMATE_TEST_VALUE") == "spaced"
    assert get_env("JOBMATE_TEST_MISSING", "fallback") == "fallback"
