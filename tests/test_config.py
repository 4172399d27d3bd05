"""Tests for configuration module."""

import json

from fub.utils.config import Config, get_fub_dir


def test_config_default_values(mock_fub_dir):
    """Config should have sensible defaults."""
    config = Config(mock_fub_dir)

    assert config.interactive is True
    assert config.menu_height == 10
    assert config.scroll_threshold == 5
    assert config.timeout_seconds == 0
    assert config.external_backend is True
    assert config.external_command == "gum"
    assert config.progress_width == 40
    assert config.debug is False


def test_fub_dir_from_env(mock_fub_dir):
    """FUB_DIR decides where config lives."""
    assert get_fub_dir() == mock_fub_dir


def test_config_loads_from_file(mock_fub_dir):
    """Config should load values from config.json."""
    (mock_fub_dir / "config.json").write_text(
        json.dumps({"menu_height": 6, "external_backend": False, "debug": True})
    )

    config = Config(mock_fub_dir)

    assert config.menu_height == 6
    assert config.external_backend is False
    assert config.debug is True


def test_config_corrupt_file_uses_defaults(mock_fub_dir):
    """A broken config.json is ignored."""
    (mock_fub_dir / "config.json").write_text("{not json")
    assert Config(mock_fub_dir).menu_height == 10


def test_config_save_roundtrip(mock_fub_dir):
    """Saved values load back."""
    config = Config(mock_fub_dir)
    config.timeout_seconds = 30
    config.save()

    assert Config(mock_fub_dir).timeout_seconds == 30


def test_env_var_overrides(mock_fub_dir, monkeypatch):
    """FUB_* variables override file values with type coercion."""
    (mock_fub_dir / "config.json").write_text(json.dumps({"menu_height": 6}))
    monkeypatch.setenv("FUB_MENU_HEIGHT", "15")
    monkeypatch.setenv("FUB_INTERACTIVE", "false")
    monkeypatch.setenv("FUB_SPINNER_DELAY", "0.25")

    config = Config(mock_fub_dir)

    assert config.menu_height == 15
    assert config.interactive is False
    assert config.spinner_delay == 0.25


def test_env_var_bad_int_ignored(mock_fub_dir, monkeypatch):
    """Unparseable numbers leave the value alone."""
    monkeypatch.setenv("FUB_MENU_HEIGHT", "tall")
    assert Config(mock_fub_dir).menu_height == 10


def test_env_cannot_replace_fub_dir(mock_fub_dir):
    """FUB_DIR itself is not a setting."""
    assert Config(mock_fub_dir).fub_dir == mock_fub_dir


def test_config_env_section(mock_fub_dir):
    """Overrides persisted in the env section apply on load."""
    config = Config(mock_fub_dir)
    config.set_env("FUB_EXTERNAL_BACKEND", "0")

    reloaded = Config(mock_fub_dir)
    assert reloaded.external_backend is False
    assert reloaded.list_env() == {"FUB_EXTERNAL_BACKEND": "0"}

    assert reloaded.unset_env("FUB_EXTERNAL_BACKEND")
    assert not reloaded.unset_env("FUB_EXTERNAL_BACKEND")
    assert Config(mock_fub_dir).external_backend is True


def test_toggles(mock_fub_dir):
    """Toggles report and persist boolean settings."""
    config = Config(mock_fub_dir)
    names = [name for name, _, _ in config.get_toggles()]
    assert names == ["interactive", "external_backend", "debug"]

    config.set_toggle("debug", True)
    assert Config(mock_fub_dir).debug is True

    config.set_toggle("menu_height", False)
    assert Config(mock_fub_dir).menu_height == 10


def test_env_var_non_positive_height_ignored(mock_fub_dir, monkeypatch):
    """A zero menu height from the shell falls back and is logged."""
    monkeypatch.setenv("FUB_MENU_HEIGHT", "0")
    monkeypatch.setenv("FUB_SPINNER_DELAY", "-1")

    config = Config(mock_fub_dir)

    assert config.menu_height == 10
    assert config.spinner_delay == 0.1
    log = (mock_fub_dir / "debug.log").read_text()
    assert "ignoring menu_height='0' from FUB_MENU_HEIGHT" in log


def test_file_values_validated(mock_fub_dir):
    """Wrong-typed or out-of-range file values fall back to defaults."""
    (mock_fub_dir / "config.json").write_text(
        json.dumps(
            {
                "menu_height": "ten",
                "progress_width": 0,
                "scroll_threshold": -3,
                "interactive": "no",
                "external_command": 7,
                "timeout_seconds": 2.0,
                "spinner_delay": 1,
            }
        )
    )

    config = Config(mock_fub_dir)

    assert config.menu_height == 10
    assert config.progress_width == 40
    assert config.scroll_threshold == 5
    assert config.interactive is True
    assert config.external_command == "gum"
    assert config.timeout_seconds == 2
    assert config.spinner_delay == 1.0


def test_non_object_file_ignored(mock_fub_dir):
    """A config.json that is not an object is treated as empty."""
    (mock_fub_dir / "config.json").write_text("[1, 2]")
    assert Config(mock_fub_dir).menu_height == 10


def test_zero_height_never_reaches_menu(
    mock_fub_dir, monkeypatch, decoder_for, fake_session, screen
):
    """A menu built from a bad height setting still runs."""
    from fub.cli.ui.native import NativeBackend
    from fub.core.selection import MenuResult

    monkeypatch.setenv("FUB_MENU_HEIGHT", "0")
    backend = NativeBackend(
        Config(mock_fub_dir),
        decoder=decoder_for("\x1b[B", "\r"),
        session_factory=fake_session,
        console=screen,
    )
    assert backend.select(["a", "b"]) == MenuResult.selected(1)
