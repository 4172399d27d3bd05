"""fub - terminal interaction engine: menus, confirmations and progress feedback."""

from importlib.metadata import version

__version__ = version("fub-tui")

from fub.cli.ui.menu import InteractiveMenu
from fub.core.selection import MenuResult, Outcome
from fub.utils.exceptions import EmptyItemList, FubError, TerminalUnavailable

__all__ = [
    "InteractiveMenu",
    "MenuResult",
    "Outcome",
    "EmptyItemList",
    "FubError",
    "TerminalUnavailable",
]
