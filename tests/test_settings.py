import json

import pytest

from tiptracker import settings


class TestSettings:
    """Test the JSON settings file."""

    def test_defaults_without_file(self, settings_file):
        prefs = settings.get_all(settings_file)
        assert prefs == settings.DEFAULTS
        assert prefs["startOfWeek"] == "sun"

    def test_set_and_get(self, settings_file):
        settings.set("startOfWeek", "mon", settings_file)
        settings.set("defaultTipOutPercent", 4.5, settings_file)
        assert settings.get("startOfWeek", settings_file) == "mon"
        assert settings.get_all(settings_file)["defaultTipOutPercent"] == 4.5

    def test_set_all_none_restores_default(self, settings_file):
        settings.set_all({"rememberLastWage": True, "lastWage": 12.0}, settings_file)
        settings.set_all({"lastWage": None}, settings_file)
        prefs = settings.get_all(settings_file)
        assert prefs["rememberLastWage"] is True
        assert prefs["lastWage"] is None

    def test_rejects_unknown_key(self, settings_file):
        with pytest.raises(ValueError):
            settings.set("theme", "dark", settings_file)
        with pytest.raises(ValueError):
            settings.get("theme", settings_file)

    def test_rejects_bad_choice(self, settings_file):
        with pytest.raises(ValueError):
            settings.set("startOfWeek", "wed", settings_file)

    def test_bad_stored_values_ignored(self, settings_file):
        with open(settings_file, "w", encoding="utf-8") as f:
            json.dump({"startOfWeek": "fri", "extra": 1, "defaultHourlyWage": 9}, f)
        prefs = settings.get_all(settings_file)
        assert prefs["startOfWeek"] == "sun"
        assert prefs["defaultHourlyWage"] == 9
        assert "extra" not in prefs

    def test_corrupt_file_falls_back(self, settings_file, capsys):
        with open(settings_file, "w", encoding="utf-8") as f:
            f.write("{not json")
        assert settings.get_all(settings_file) == settings.DEFAULTS
        assert "Could not read settings" in capsys.readouterr().out

    def test_reset(self, settings_file):
        settings.set("startOfWeek", "mon", settings_file)
        settings.reset(settings_file)
        assert settings.get("startOfWeek", settings_file) == "sun"
        settings.reset(settings_file)
