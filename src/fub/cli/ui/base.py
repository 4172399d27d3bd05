"""Base protocol for render backends."""

from typing import Optional, Protocol, Sequence

from fub.core.selection import MenuResult


class RenderBackend(Protocol):
    """Protocol for menu backends.

    Implemented by the native renderer and by the external helper adapter,
    so InteractiveMenu can try one and fall back to the other.
    """

    name: str

    def select(
        self,
        items: Sequence[str],
        title: str = "",
        cursor: int = 0,
        allow_quit: bool = True,
        allow_help: bool = False,
    ) -> MenuResult:
        """Show a single-select menu."""
        ...

    def multiselect(
        self,
        items: Sequence[str],
        title: str = "",
        selected: frozenset[int] = frozenset(),
        allow_select_all: bool = True,
        allow_select_none: bool = True,
    ) -> MenuResult:
        """Show a multi-select menu."""
        ...

    def confirm(
        self,
        message: str,
        warning: Optional[str] = None,
        default: bool = False,
        require_expert: bool = False,
    ) -> bool:
        """Ask a yes/no question, return True for yes."""
        ...

    def pager(self, text: str, title: str = "Help") -> None:
        """Show read-only text until the user dismisses it."""
        ...
