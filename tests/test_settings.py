"""Unit tests for ini settings loading and command-line overrides."""

import argparse
import configparser

import pytest

from settings import DEFAULTS, SettingsError, apply_overrides, coerce, load_settings


def write_ini(tmp_path, text):
    path = tmp_path / "base64clip.ini"
    path.write_text(text, encoding="utf-8")
    return str(path)


def cli(**kwargs):
    base = dict(hold=None, no_decode_notice=False, no_history=False, db=None,
                hotkey_encode=None, hotkey_decode=None)
    base.update(kwargs)
    return argparse.Namespace(**base)


@pytest.mark.parametrize("raw, value", [
    ("500", 500),
    ("0.5", 0.5),
    ("true", True),
    ("Off", False),
    ("1", 1),
    (" ctrl+alt+e ", "ctrl+alt+e"),
])
def test_coerce(raw, value):
    assert coerce(raw) == value
    assert type(coerce(raw)) is type(value)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "absent.ini"))
    assert settings["notifications"] == DEFAULTS["notifications"]
    assert settings["history"]["enabled"] is True
    assert settings["hotkeys"] == {"encode": "ctrl+alt+e", "decode": "ctrl+alt+d"}


def test_defaults_are_not_shared(tmp_path):
    settings = load_settings(str(tmp_path / "absent.ini"))
    settings["notifications"]["hold_ms"] = 1
    assert DEFAULTS["notifications"]["hold_ms"] == 5000


def test_file_values_override_defaults(tmp_path):
    path = write_ini(tmp_path, """
[notifications]
hold_ms = 2500
notify_on_decode = no

[hotkeys]
encode = ctrl+alt+e

[extra]
colour = blue
""")
    settings = load_settings(path)
    assert settings["notifications"]["hold_ms"] == 2500
    assert settings["notifications"]["fade_in_ms"] == 500
    assert settings["notifications"]["notify_on_decode"] is False
    assert settings["hotkeys"]["encode"] == "ctrl+alt+e"
    assert settings["extra"] == {"colour": "blue"}
    assert settings["path"] == path


def test_relative_db_resolves_next_to_ini(tmp_path):
    path = write_ini(tmp_path, "[history]\ndb = data/history.db\n")
    settings = load_settings(path)
    assert settings["history"]["db"] == str((tmp_path / "data" / "history.db").resolve())


def test_malformed_file_raises(tmp_path):
    path = write_ini(tmp_path, "no section header\n")
    with pytest.raises(configparser.Error):
        load_settings(path)


def test_cli_overrides(tmp_path):
    settings = load_settings(str(tmp_path / "absent.ini"))
    apply_overrides(settings, cli(hold=1200, no_history=True, no_decode_notice=True,
                                  db="x.db", hotkey_decode="ctrl+shift+d"))
    assert settings["notifications"]["hold_ms"] == 1200
    assert settings["notifications"]["notify_on_decode"] is False
    assert settings["history"] == {"enabled": False, "db": "x.db"}
    assert settings["hotkeys"] == {"encode": "ctrl+alt+e", "decode": "ctrl+shift+d"}


def test_cli_defaults_leave_file_values(tmp_path):
    path = write_ini(tmp_path, "[notifications]\nhold_ms = 2500\n")
    settings = apply_overrides(load_settings(path), cli())
    assert settings["notifications"]["hold_ms"] == 2500
    assert settings["history"]["enabled"] is True


@pytest.mark.parametrize("line", [
    "hold_ms = long",
    "fade_in_ms = -1",
    "fade_out_ms = 0.5",
    "hold_ms = yes",
])
def test_unusable_timing_in_file_is_rejected(tmp_path, line):
    path = write_ini(tmp_path, f"[notifications]\n{line}\n")
    with pytest.raises(SettingsError, match=line.split()[0]):
        load_settings(path)


def test_zero_timing_is_allowed(tmp_path):
    path = write_ini(tmp_path, "[notifications]\nfade_in_ms = 0\nfade_out_ms = 0\n")
    settings = load_settings(path)
    assert settings["notifications"]["fade_in_ms"] == 0


def test_negative_hold_from_cli_is_rejected(tmp_path):
    settings = load_settings(str(tmp_path / "absent.ini"))
    with pytest.raises(SettingsError, match="hold_ms"):
        apply_overrides(settings, cli(hold=-6000))


def test_settings_error_is_a_config_error():
    assert issubclass(SettingsError, configparser.Error)
