"""Menu state and selection results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

from fub.core.keys import Key
from fub.core.viewport import Viewport
from fub.utils.constants import DEFAULT_MENU_HEIGHT, HELP_CODE, QUIT_CODE
from fub.utils.exceptions import EmptyItemList


class Outcome(Enum):
    """How a menu interaction ended."""

    SELECTED = "selected"
    QUIT = "quit"
    HELP = "help"
    # Non-interactive, timed out, or input went away
    DEFAULT = "default"


@dataclass(frozen=True)
class MenuResult:
    """Typed result of a menu call.

    ``code`` follows the shell contract: the index on a selection, 130 on
    quit, 126 on a help request.
    """

    outcome: Outcome
    index: Optional[int] = None
    indices: frozenset[int] = frozenset()

    @classmethod
    def selected(cls, index: int) -> "MenuResult":
        return cls(Outcome.SELECTED, index=index)

    @classmethod
    def chosen(cls, indices: Iterable[int]) -> "MenuResult":
        return cls(Outcome.SELECTED, indices=frozenset(indices))

    @classmethod
    def quit(cls) -> "MenuResult":
        return cls(Outcome.QUIT)

    @classmethod
    def help(cls) -> "MenuResult":
        return cls(Outcome.HELP)

    @classmethod
    def default(
        cls, index: Optional[int] = None, indices: Iterable[int] = ()
    ) -> "MenuResult":
        return cls(Outcome.DEFAULT, index=index, indices=frozenset(indices))

    @property
    def cancelled(self) -> bool:
        return self.outcome in (Outcome.QUIT, Outcome.HELP)

    @property
    def code(self) -> int:
        if self.outcome is Outcome.QUIT:
            return QUIT_CODE
        if self.outcome is Outcome.HELP:
            return HELP_CODE
        return self.index if self.index is not None else 0

    def items(self, options: Sequence[str]) -> list[str]:
        """The chosen option strings, in item order."""
        if self.cancelled:
            return []
        if self.index is not None:
            return [options[self.index]]
        return [options[i] for i in sorted(self.indices)]


def resolve_defaults(
    items: Sequence[str], defaults: Iterable[Union[int, str]]
) -> set[int]:
    """Map default choices (indices or item strings) to indices.

    A string picks the first item equal to it; unknown entries are skipped.
    """
    selected: set[int] = set()
    for default in defaults:
        if isinstance(default, int):
            if 0 <= default < len(items):
                selected.add(default)
            continue
        for i, item in enumerate(items):
            if item == default:
                selected.add(i)
                break
    return selected


@dataclass
class MenuState:
    """Single-select menu: the cursor is the selection."""

    items: Sequence[str]
    viewport: Viewport
    allow_quit: bool = True
    allow_help: bool = False

    @classmethod
    def create(
        cls,
        items: Sequence[str],
        cursor: int = 0,
        height: int = DEFAULT_MENU_HEIGHT,
        **options,
    ) -> "MenuState":
        if not items:
            raise EmptyItemList("menu needs at least one item")
        viewport = Viewport(len(items), height=height, cursor=cursor)
        return cls(list(items), viewport, **options)

    @property
    def cursor(self) -> int:
        return self.viewport.cursor

    def move(self, key: Key) -> bool:
        """Apply a navigation key. Returns False for non-navigation keys."""
        if key is Key.UP:
            self.viewport.move_up()
        elif key is Key.DOWN:
            self.viewport.move_down()
        elif key is Key.HOME:
            self.viewport.home()
        elif key is Key.END:
            self.viewport.end_of_list()
        else:
            return False
        return True

    def result(self) -> MenuResult:
        return MenuResult.selected(self.cursor)


@dataclass
class MultiMenuState(MenuState):
    """Multi-select menu: a toggle set of indices."""

    selected: set[int] = field(default_factory=set)
    allow_select_all: bool = True
    allow_select_none: bool = True

    def toggle(self, index: Optional[int] = None) -> None:
        """Flip membership of ``index`` (the cursor row by default)."""
        index = self.cursor if index is None else index
        if not 0 <= index < len(self.items):
            raise IndexError(f"item index out of range: {index}")
        if index in self.selected:
            self.selected.discard(index)
        else:
            self.selected.add(index)

    def select_all(self) -> None:
        if self.allow_select_all:
            self.selected = set(range(len(self.items)))

    def select_none(self) -> None:
        if self.allow_select_none:
            self.selected = set()

    def toggle_all(self) -> None:
        """Select everything, or clear if everything is already selected."""
        if not self.allow_select_all:
            return
        if len(self.selected) == len(self.items):
            self.selected = set()
        else:
            self.select_all()

    def result(self) -> MenuResult:
        return MenuResult.chosen(self.selected)
