"""Tests for pi.repl.config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pi.repl.config import ReplConfig, config_from_dict, get_config_dir, load_config


class TestReplConfig:
    def test_defaults(self) -> None:
        config = ReplConfig()
        assert config.initial_capacity == 1024
        assert config.match_delay_ms == 150
        assert config.match_delay == pytest.approx(0.15)
        assert config.keep_signals is False
        assert config.history_limit == 1000

    def test_config_dir_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_CONFIG_DIR", str(tmp_path))
        assert get_config_dir() == tmp_path
        assert ReplConfig().history_file == str(tmp_path / "repl_history.json")


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_CONFIG_DIR", str(tmp_path))
        assert load_config() == ReplConfig()

    def test_reads_camel_case_keys(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_CONFIG_DIR", str(tmp_path))
        (tmp_path / "repl.json").write_text(
            json.dumps(
                {
                    "initialCapacity": 64,
                    "matchDelayMs": 0,
                    "keepSignals": True,
                    "historyFile": "/tmp/h.json",
                    "historyLimit": 10,
                    "unknownKey": "ignored",
                }
            )
        )
        config = load_config()
        assert config.initial_capacity == 64
        assert config.match_delay_ms == 0
        assert config.keep_signals is True
        assert config.history_file == "/tmp/h.json"
        assert config.history_limit == 10

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"historyLimit": 5}))
        assert load_config(path).history_limit == 5

    def test_malformed_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "repl.json"
        path.write_text("[1, 2")
        assert load_config(path) == ReplConfig()

    def test_non_object_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "repl.json"
        path.write_text("[1, 2]")
        assert load_config(path) == ReplConfig()


class TestConfigFromDict:
    def test_wrong_types_are_ignored(self) -> None:
        config = config_from_dict({"initialCapacity": "big", "historyLimit": True, "keepSignals": 1})
        assert config.initial_capacity == 1024
        assert config.history_limit == 1000
        assert config.keep_signals is False

    def test_null_values_are_ignored(self) -> None:
        assert config_from_dict({"matchDelayMs": None}).match_delay_ms == 150
