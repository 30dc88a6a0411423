"""Tests for config.json overrides and hot reload."""

import json
import os

import pytest

import config


@pytest.fixture(autouse=True)
def restore_config(monkeypatch):
    """Undo any global written by apply_config during a test."""
    for key in config.CONFIG_KEYS:
        monkeypatch.setattr(config, key, getattr(config, key))
    monkeypatch.setattr(config, "_cfg_mtime", 0.0)


class TestApplyConfig:
    def test_no_change(self):
        flags = config.apply_config({"FPS": config.FPS})
        assert flags["any"] is False

    def test_weather_flag(self):
        flags = config.apply_config({"WEATHER_LOCATION": "Somewhere-Else"})
        assert flags["any"] and flags["weather"]
        assert not flags["colors"] and not flags["clock"]
        assert config.WEATHER_LOCATION == "Somewhere-Else"

    def test_color_flag(self):
        flags = config.apply_config({"BG_COLOR": "#000000", "RAIN_HIGH_PCT": 70})
        assert flags["colors"] and not flags["weather"]

    def test_clock_and_display_flags(self):
        flags = config.apply_config({"CLOCK_TZ": "Asia/Tokyo", "FPS": 5})
        assert flags["clock"] and flags["display"]

    def test_output_mode_uppercased(self):
        config.apply_config({"OUTPUT_MODE": "headless"})
        assert config.OUTPUT_MODE == "HEADLESS"

    def test_unknown_keys_ignored(self):
        flags = config.apply_config({"NOT_A_SETTING": 1})
        assert flags["any"] is False
        assert not hasattr(config, "NOT_A_SETTING")


    def test_demo_mode_counts_as_weather_change(self):
        flags = config.apply_config({"DEMO_MODE": not config.DEMO_MODE})
        assert flags["weather"]


class TestCoercion:
    def test_numeric_strings_are_cast(self):
        config.apply_config({"FPS": "24", "WEATHER_TIMEOUT": "7.5", "FULLSCREEN": "1"})
        assert config.FPS == 24
        assert config.WEATHER_TIMEOUT == 7.5
        assert config.FULLSCREEN is True

    def test_values_are_clamped(self):
        config.apply_config({"WEATHER_REFRESH_SEC": 5, "RAIN_HIGH_PCT": 250, "FPS": 0})
        assert config.WEATHER_REFRESH_SEC == 60
        assert config.RAIN_HIGH_PCT == 100
        assert config.FPS == 1

    @pytest.mark.parametrize("key,value", [
        ("FPS", None), ("RAIN_HIGH_PCT", "oops"), ("WEATHER_REFRESH_SEC", True), ("WEATHER_LOCATION", None),
    ])
    def test_wrong_type_is_ignored(self, key, value, capsys):
        before = getattr(config, key)
        flags = config.apply_config({key: value})
        assert flags["any"] is False
        assert getattr(config, key) == before
        assert "[CFG] Ignoring" in capsys.readouterr().out


class TestReload:
    def test_initial_load_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "CONFIG_PATH", str(tmp_path / "config.json"))
        assert config.initial_config_load() == {"any": False}

    def test_reload_on_mtime_change(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        monkeypatch.setattr(config, "CONFIG_PATH", str(path))
        path.write_text(json.dumps({"FPS": 12}))
        config.initial_config_load()
        assert config.FPS == 12
        assert config.maybe_reload_config() == {"reloaded": False}

        path.write_text(json.dumps({"FPS": 24}))
        m = os.path.getmtime(path) + 5
        os.utime(path, (m, m))
        flags = config.maybe_reload_config()
        assert flags["reloaded"] and flags["display"]
        assert config.FPS == 24

    def test_reload_without_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "CONFIG_PATH", str(tmp_path / "gone.json"))
        assert config.maybe_reload_config() == {"reloaded": False}
