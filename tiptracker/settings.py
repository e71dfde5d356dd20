"""
User settings, stored as a small JSON object on disk.

Callers read settings once with `get_all()` and pass the resolved values on
as plain arguments; nothing else in the package looks settings up.
"""

import json
import os

DEFAULT_SETTINGS_PATH = "tiptracker_settings.json"

DEFAULTS = {
    "startOfWeek": "sun",
    "defaultTipOutBasis": "tips",
    "defaultTipOutPercent": 3,
    "rememberLastWage": False,
    "lastWage": None,
    "defaultHourlyWage": 15.00,
}

_CHOICES = {
    "startOfWeek": ("sun", "mon"),
    "defaultTipOutBasis": ("tips", "sales"),
}


def settings_path(path=None):
    return path or os.getenv("TIPTRACKER_SETTINGS") or DEFAULT_SETTINGS_PATH


def _check_key(key):
    if key not in DEFAULTS:
        raise ValueError(f"Unknown setting {key!r}; expected one of {sorted(DEFAULTS)}")


def _read(path):
    path = settings_path(path)
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"⚠️ Could not read settings from {path}: {e}")
        return {}
    if not isinstance(stored, dict):
        print(f"⚠️ Ignoring settings file {path}: expected a JSON object")
        return {}
    return stored


def _write(stored, path):
    with open(settings_path(path), "w", encoding="utf-8") as f:
        json.dump(stored, f, indent=2, ensure_ascii=False)


def get_all(path=None):
    """Defaults merged with whatever valid values are stored."""
    out = dict(DEFAULTS)
    for key, value in _read(path).items():
        if key not in DEFAULTS:
            continue
        if key in _CHOICES and value not in _CHOICES[key]:
            continue
        out[key] = value
    return out


def get(key, path=None):
    _check_key(key)
    return get_all(path)[key]


def set_all(partial, path=None):
    """Store several values at once; None removes a key so it falls back to its default."""
    for key in partial:
        _check_key(key)
        if key in _CHOICES and partial[key] is not None and partial[key] not in _CHOICES[key]:
            raise ValueError(f"{key} must be one of {_CHOICES[key]}, got {partial[key]!r}")

    stored = {k: v for k, v in _read(path).items() if k in DEFAULTS}
    for key, value in partial.items():
        if value is None:
            stored.pop(key, None)
        else:
            stored[key] = value
    _write(stored, path)


def set(key, value, path=None):
    set_all({key: value}, path)


def reset(path=None):
    path = settings_path(path)
    if os.path.exists(path):
        os.remove(path)
