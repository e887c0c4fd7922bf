"""Tests for the configuration service."""

from __future__ import annotations

import json

import pytest

from taskdeck.models.config_models import AppConfig


class TestLoadConfig:
    def test_first_run_writes_defaults(self, tmp_config):
        config = tmp_config.load_config()

        assert config == AppConfig()
        assert tmp_config.config_path.exists()
        assert json.loads(tmp_config.config_path.read_text())["history"]["max_size"] == 50

    def test_reads_existing_file(self, tmp_config):
        tmp_config.config_path.write_text(json.dumps({"pomodoro": {"work_minutes": 50}}))

        config = tmp_config.load_config()

        assert config.pomodoro.work_minutes == 50
        assert config.pomodoro.short_break_minutes == 5

    def test_invalid_file_raises(self, tmp_config):
        tmp_config.config_path.write_text("{nope")

        with pytest.raises(RuntimeError, match="Failed to load config"):
            tmp_config.load_config()

    def test_to_settings_converts_minutes(self, tmp_config):
        settings = tmp_config.config.pomodoro.to_settings()

        assert settings.work_duration == 1500
        assert settings.long_break_duration == 900


class TestSetValue:
    def test_sets_and_persists(self, tmp_config):
        tmp_config.set_value("pomodoro.work_minutes", "45")

        saved = json.loads(tmp_config.config_path.read_text())
        assert saved["pomodoro"]["work_minutes"] == 45

    def test_unknown_key(self, tmp_config):
        with pytest.raises(KeyError):
            tmp_config.set_value("pomodoro.colour", "red")

    def test_invalid_value(self, tmp_config):
        with pytest.raises(ValueError):
            tmp_config.set_value("history.max_size", "0")

    def test_reset(self, tmp_config):
        tmp_config.set_value("notifications.sound", "false")

        config = tmp_config.reset_config()

        assert config.notifications.sound is True


class TestStorePath:
    def test_defaults_to_data_dir(self, tmp_config, tmp_path):
        assert tmp_config.store_path == tmp_path / "store.json"

    def test_override(self, tmp_config, tmp_path):
        tmp_config.config.store_path = str(tmp_path / "elsewhere.json")

        assert tmp_config.store_path == tmp_path / "elsewhere.json"
