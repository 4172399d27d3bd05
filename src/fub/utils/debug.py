"""Diagnostic logging to ``<fub_dir>/debug.log``.

``debug()`` is a no-op unless the ``debug`` setting is on, in which case
lines also go to stderr. ``log_error()`` always writes, to the file only,
so failures the user never sees (backend fallback, terminal restore
problems) still leave a trace.
"""

import sys
import traceback
from datetime import datetime
from typing import Optional

from fub.utils.config import Config, get_fub_dir

_config: Optional[Config] = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = Config(get_fub_dir())
    return _config


def reload_config():
    """Forget the cached config (after the debug toggle or FUB_DIR changes)."""
    global _config
    _config = None


def _format(category: str, message: str) -> str:
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    return f"[fub:{category}] {stamp} {message}"


def _log_to_file(line: str):
    try:
        fub_dir = get_fub_dir()
        fub_dir.mkdir(parents=True, exist_ok=True)
        with open(fub_dir / "debug.log", "a") as f:
            f.write(line + "\n")
    except OSError:
        pass  # Logging must never break the UI


def debug(category: str, message: str, **kwargs):
    """Log a diagnostic line when debug mode is on.

    Args:
        category: One of 'keys', 'session', 'backend', 'menu'
        message: What happened
        **kwargs: Context, rendered as ``| key=value ...``
    """
    if not _get_config().debug:
        return

    line = _format(category, message)
    if kwargs:
        line += " | " + " ".join(f"{k}={v}" for k, v in kwargs.items())

    _log_to_file(line)
    try:
        print(line, file=sys.stderr)
    except BrokenPipeError:
        pass


def debug_keys(message: str, **kwargs):
    debug("keys", message, **kwargs)


def debug_session(message: str, **kwargs):
    debug("session", message, **kwargs)


def debug_backend(message: str, **kwargs):
    debug("backend", message, **kwargs)


def debug_menu(message: str, **kwargs):
    debug("menu", message, **kwargs)


def log_error(category: str, message: str, exc: Optional[BaseException] = None):
    """Record an error regardless of debug mode, with traceback if given."""
    line = _format(category, f"ERROR: {message}")
    if exc is not None:
        line += "\n" + "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    _log_to_file(line)
