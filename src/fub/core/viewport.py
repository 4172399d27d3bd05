"""Visible window over a long item list."""

from dataclasses import dataclass

from fub.utils.constants import DEFAULT_MENU_HEIGHT
from fub.utils.exceptions import EmptyItemList


@dataclass
class Viewport:
    """Cursor plus the slice of items on screen.

    Invariants:
        0 <= cursor < total
        start <= cursor <= start + height - 1
        0 <= start <= max(0, total - height)

    Moving past the window edge shifts ``start`` by the overflow only, so
    the list scrolls one row at a time instead of recentering.
    """

    total: int
    height: int = DEFAULT_MENU_HEIGHT
    cursor: int = 0
    start: int = 0

    def __post_init__(self):
        if self.total <= 0:
            raise EmptyItemList("viewport needs at least one item")
        if self.height < 1:
            raise ValueError(f"viewport height must be positive, got {self.height}")
        self.cursor = min(max(self.cursor, 0), self.total - 1)
        self.start = min(max(self.start, 0), self.max_start)
        self._follow_cursor()

    @property
    def max_start(self) -> int:
        return max(0, self.total - self.height)

    @property
    def end(self) -> int:
        """Exclusive end index of the visible slice."""
        return min(self.start + self.height, self.total)

    @property
    def visible(self) -> range:
        return range(self.start, self.end)

    @property
    def more_above(self) -> bool:
        return self.start > 0

    @property
    def more_below(self) -> bool:
        return self.start + self.height - 1 < self.total - 1

    @property
    def hidden_above(self) -> int:
        return self.start

    @property
    def hidden_below(self) -> int:
        return self.total - self.end

    def _follow_cursor(self) -> None:
        if self.cursor < self.start:
            self.start = self.cursor
        elif self.cursor > self.start + self.height - 1:
            self.start = self.cursor - self.height + 1

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
            self._follow_cursor()

    def move_down(self) -> None:
        if self.cursor < self.total - 1:
            self.cursor += 1
            self._follow_cursor()

    def home(self) -> None:
        self.cursor = 0
        self.start = 0

    def end_of_list(self) -> None:
        self.cursor = self.total - 1
        self.start = self.max_start

    def jump(self, index: int) -> None:
        """Put the cursor on ``index`` (clamped), scrolling minimally."""
        self.cursor = min(max(index, 0), self.total - 1)
        self._follow_cursor()
