"""Configuration for the interaction engine.

Resolution order: built-in defaults, ``config.json`` in the fub directory,
its persisted ``env`` section, then ``FUB_*`` variables from the shell.
"""

import json
import math
import os
from pathlib import Path
from typing import Optional

from fub.utils.constants import (
    DEFAULT_EXTERNAL_COMMAND,
    DEFAULT_MENU_HEIGHT,
    DEFAULT_PROGRESS_WIDTH,
    DEFAULT_SCROLL_THRESHOLD,
    DEFAULT_SPINNER_DELAY,
)

ENV_PREFIX = "FUB_"

# Setting name -> default; the default's type drives env coercion
DEFAULTS: dict[str, object] = {
    "interactive": True,
    "menu_height": DEFAULT_MENU_HEIGHT,
    "scroll_threshold": DEFAULT_SCROLL_THRESHOLD,
    # Idle timeout for native menus, 0 blocks forever
    "timeout_seconds": 0,
    "external_backend": True,
    "external_command": DEFAULT_EXTERNAL_COMMAND,
    "spinner_delay": DEFAULT_SPINNER_DELAY,
    "progress_width": DEFAULT_PROGRESS_WIDTH,
    "debug": False,
}


def get_fub_dir() -> Path:
    """Get the fub data directory (XDG-compliant)."""
    if env_dir := os.environ.get("FUB_DIR"):
        return Path(env_dir)
    return Path.home() / ".config" / "fub"


def _coerce(raw: str, like: object) -> Optional[object]:
    """Parse ``raw`` as the type of ``like``; None if it does not parse."""
    if isinstance(like, bool):
        return raw.strip().lower() in ("true", "1", "yes", "on")
    for kind in (int, float):
        if isinstance(like, kind):
            try:
                return kind(raw)
            except ValueError:
                return None
    return raw


# Settings that must be above zero; other numbers only need to be >= 0
POSITIVE = {"menu_height", "spinner_delay", "progress_width"}


def _validate(name: str, value: object) -> Optional[object]:
    """Return ``value`` in the setting's type, or None if it is unusable."""
    like = DEFAULTS[name]
    if isinstance(like, bool) or isinstance(value, bool):
        return value if type(value) is type(like) else None
    if isinstance(like, (int, float)):
        if not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
        if isinstance(like, int) and value != int(value):
            return None
        value = type(like)(value)
        if value < 0 or (value == 0 and name in POSITIVE):
            return None
        return value
    return value if isinstance(value, str) and value else None


def _reject(name: str, value: object, source: str):
    # debug imports this module; log_error never reads config
    from fub.utils.debug import log_error

    log_error("config", f"ignoring {name}={value!r} from {source}")


class Config:
    """Interaction engine configuration.

    The engine only consumes the resolved primitive values; loading and
    env overrides live here so callers can hand a ready Config around.
    """

    TOGGLES: dict[str, str] = {
        "interactive": "Prompt the user (off = always take defaults)",
        "external_backend": "Use gum for menus when installed",
        "debug": "Log to ~/.config/fub/debug.log",
    }

    def __init__(self, fub_dir: Optional[Path] = None):
        self.fub_dir = fub_dir or get_fub_dir()
        self._config_file = self.fub_dir / "config.json"
        self.env: dict[str, str] = {}
        self._load()

    def _load(self):
        # name -> value before / after an env override, so save() keeps
        # overrides out of config.json
        self._base: dict[str, object] = {}
        self._overrides: dict[str, object] = {}
        for name, default in DEFAULTS.items():
            setattr(self, name, default)

        if self._config_file.exists():
            try:
                data = json.loads(self._config_file.read_text())
            except (json.JSONDecodeError, OSError):
                data = {}
            if not isinstance(data, dict):
                data = {}
            for name in DEFAULTS:
                if name not in data:
                    continue
                value = _validate(name, data[name])
                if value is None:
                    _reject(name, data[name], "config.json")
                    continue
                setattr(self, name, value)
            env = data.get("env", {})
            self.env = dict(env) if isinstance(env, dict) else {}

        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Apply the persisted env section, then FUB_* shell variables."""
        shell = {k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)}
        # Later sources win
        for source in (self.env, shell):
            for key, raw in source.items():
                # config.env accepts both FUB_FOO and FOO
                name = key[len(ENV_PREFIX) :] if key.startswith(ENV_PREFIX) else key
                name = name.lower()
                if name not in DEFAULTS:
                    continue
                value = _coerce(str(raw), DEFAULTS[name])
                if value is not None:
                    value = _validate(name, value)
                if value is None:
                    _reject(name, raw, key)
                    continue
                self._base.setdefault(name, getattr(self, name))
                self._overrides[name] = value
                setattr(self, name, value)

    def as_dict(self) -> dict[str, object]:
        """Resolved values, for display."""
        return {name: getattr(self, name) for name in DEFAULTS}

    def save(self):
        """Write current values and the env section to config.json."""
        self.fub_dir.mkdir(parents=True, exist_ok=True)
        data = self.as_dict()
        for name, value in self._overrides.items():
            if data[name] == value:
                data[name] = self._base[name]
        data["env"] = self.env
        self._config_file.write_text(json.dumps(data, indent=2))

    def set_env(self, key: str, value: str):
        """Persist an env override and apply it immediately."""
        self.env[key] = value
        self.save()
        self._apply_env_overrides()

    def unset_env(self, key: str) -> bool:
        """Drop a persisted env override. Returns True if it existed."""
        if self.env.pop(key, None) is None:
            return False
        self.save()
        return True

    def list_env(self) -> dict[str, str]:
        return dict(self.env)

    def get_toggles(self) -> list[tuple[str, str, bool]]:
        """(name, description, enabled) for each boolean setting."""
        return [
            (name, description, bool(getattr(self, name)))
            for name, description in self.TOGGLES.items()
        ]

    def set_toggle(self, attr: str, enabled: bool):
        """Set a toggle and persist it. Unknown names are ignored."""
        if attr in self.TOGGLES:
            setattr(self, attr, enabled)
            self.save()
