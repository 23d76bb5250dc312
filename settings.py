#!/usr/bin/env python3
"""
settings.py - ini configuration for Base64Clip.

base64clip.ini format:
    [notifications]
    fade_in_ms = 500
    hold_ms = 5000
    fade_out_ms = 500
    notify_on_decode = true

    [history]
    enabled = true
    db = base64clip.db          # relative paths resolve next to the ini file

    [hotkeys]
    encode = ctrl+alt+e
    decode = ctrl+alt+d
"""

import configparser
from pathlib import Path

INI_NAME = "base64clip.ini"

DEFAULTS = {
    "notifications": {
        "fade_in_ms":       500,
        "hold_ms":          5000,
        "fade_out_ms":      500,
        "notify_on_decode": True,
    },
    "history": {
        "enabled": True,
        "db":      "",
    },
    "hotkeys": {
        "encode": "ctrl+alt+e",
        "decode": "ctrl+alt+d",
    },
}

class SettingsError(configparser.Error):
    """A setting has a value the application cannot use."""


TIMING_KEYS = ("fade_in_ms", "hold_ms", "fade_out_ms")

_TRUE  = {"yes", "true", "on"}
_FALSE = {"no", "false", "off"}


def default_ini_path() -> str:
    return str(Path(__file__).resolve().parent / INI_NAME)


def coerce(value: str):
    """Try yes/no words, then int, then float, then leave as string."""
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    for cast in (int, float):
        try:
            return cast(value)
        except (ValueError, TypeError):
            pass
    return value.strip()


def validate_timings(settings: dict) -> dict:
    """Fade timings must be whole, non-negative milliseconds."""
    notes = settings["notifications"]
    for key in TIMING_KEYS:
        value = notes[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SettingsError(
                f"[notifications] {key} must be a non-negative whole number "
                f"of milliseconds, got {value!r}"
            )
    return settings


def load_ini(path: str) -> configparser.ConfigParser:
    """Load the ini file if it exists; an absent file gives an empty parser."""
    cfg = configparser.ConfigParser()
    ini_path = Path(path)
    if ini_path.exists():
        cfg.read(ini_path, encoding="utf-8")
    return cfg


def load_settings(path: str = None) -> dict:
    """
    Return {section: {key: value}} with DEFAULTS filled in and file values
    type-coerced. Raises configparser.Error on a malformed file and
    SettingsError on unusable fade timings.
    """
    path = path or default_ini_path()
    cfg = load_ini(path)

    settings = {section: dict(values) for section, values in DEFAULTS.items()}
    for section in cfg.sections():
        settings.setdefault(section, {})
        for key, raw in cfg[section].items():
            settings[section][key] = coerce(raw)

    db = str(settings["history"].get("db") or "")
    if db and not Path(db).is_absolute():
        settings["history"]["db"] = str(Path(path).resolve().parent / db)

    settings["path"] = str(path)
    return validate_timings(settings)


def apply_overrides(settings: dict, args) -> dict:
    """Fold argparse options over file settings. None means 'not given'."""
    notes   = settings["notifications"]
    history = settings["history"]
    hotkeys = settings["hotkeys"]

    if getattr(args, "hold", None) is not None:
        notes["hold_ms"] = args.hold
    if getattr(args, "no_decode_notice", False):
        notes["notify_on_decode"] = False
    if getattr(args, "no_history", False):
        history["enabled"] = False
    if getattr(args, "db", None):
        history["db"] = args.db
    if getattr(args, "hotkey_encode", None):
        hotkeys["encode"] = args.hotkey_encode
    if getattr(args, "hotkey_decode", None):
        hotkeys["decode"] = args.hotkey_decode
    return validate_timings(settings)
