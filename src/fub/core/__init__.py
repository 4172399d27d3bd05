"""Core interaction model: keys, terminal session, viewport and selection."""

from fub.core.keys import FdByteReader, Key, KeyDecoder, KeyEvent
from fub.core.selection import MenuResult, MenuState, MultiMenuState, Outcome
from fub.core.session import TerminalSession, terminal_available, terminal_session
from fub.core.viewport import Viewport

__all__ = [
    "FdByteReader",
    "Key",
    "KeyDecoder",
    "KeyEvent",
    "MenuResult",
    "MenuState",
    "MultiMenuState",
    "Outcome",
    "TerminalSession",
    "Viewport",
    "terminal_available",
    "terminal_session",
]
