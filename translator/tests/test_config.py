from pathlib import Path

import pytest

from translator.config import DEFAULT_CONFIG, Config, ConfigError


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_match_documented_values():
    config = Config()

    assert config.orchestrator.debounce_ms(cloud=False) == 200
    assert config.orchestrator.debounce_ms(cloud=True) == 500
    assert config.playback.sample_rate_hz == 24_000
    assert config.playback.channels == 1
    assert config.history.max_entries == 50
    assert config.history.local_key == "translation_history"
    assert config.providers.translation.type == "mock"


def test_yaml_files_merge_left_to_right(tmp_path):
    base = _write(
        tmp_path / "base.yml",
        "orchestrator:\n  cloud_debounce_ms: 800\nproviders:\n  translation:\n    type: openai\n    model: gpt-4o\n",
    )
    override = _write(tmp_path / "override.yml", "providers:\n  translation:\n    model: gpt-4o-mini\n")

    config = Config.from_yaml([base, override, tmp_path / "missing.yml"])

    assert config.orchestrator.cloud_debounce_ms == 800
    assert config.orchestrator.local_debounce_ms == 200
    assert config.providers.translation.type == "openai"
    assert config.providers.translation.model == "gpt-4o-mini"
    assert config.providers.speech.type == "mock"


def test_env_overrides_apply_on_top_of_yaml(tmp_path, monkeypatch):
    path = _write(tmp_path / "c.yml", "system:\n  log_level: WARNING\n")
    monkeypatch.setenv("TR_SYSTEM_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TR_ORCHESTRATOR_LOCAL_DEBOUNCE_MS", "150")
    monkeypatch.setenv("TR_HISTORY_REQUIRE_IDENTITY", "yes")
    monkeypatch.setenv("TR_PROVIDERS_SPEECH_VOICE", "alloy")

    config = Config.load([path])

    assert config.system.log_level == "DEBUG"
    assert config.orchestrator.local_debounce_ms == 150
    assert config.history.require_identity is True
    assert config.providers.speech.voice == "alloy"


def test_round_trip_through_dict():
    config = Config.from_dict(DEFAULT_CONFIG.to_dict())
    assert config == DEFAULT_CONFIG


def test_unknown_key_is_a_config_error():
    with pytest.raises(ConfigError):
        Config.from_dict({"playback": {"volume": 11}})


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = _write(tmp_path / "list.yml", "- a\n- b\n")
    with pytest.raises(ConfigError):
        Config.from_yaml([path])


def test_local_path_expands_user_home():
    config = Config()
    assert "~" not in str(config.history.resolved_local_path())
