"""Tests for the scrolling viewport."""

import pytest

from fub.core.viewport import Viewport
from fub.utils.exceptions import EmptyItemList


def assert_invariants(vp: Viewport):
    assert 0 <= vp.cursor < vp.total
    assert vp.start <= vp.cursor <= vp.start + vp.height - 1
    assert 0 <= vp.start <= max(0, vp.total - vp.height)


class TestViewportScrolling:
    """Tests for cursor movement and window adjustment."""

    def test_nine_downs_then_tenth(self):
        """Nine Downs stay in the first window, the tenth scrolls by one."""
        vp = Viewport(20, height=10)
        for _ in range(9):
            vp.move_down()
        assert (vp.cursor, vp.start) == (9, 0)

        vp.move_down()
        assert (vp.cursor, vp.start) == (10, 1)

    def test_scrolls_by_overflow_only(self):
        """Moving below the window shifts it by one row, no recentering."""
        vp = Viewport(20, height=10, cursor=9)
        assert vp.start == 0

        vp.move_down()

        assert vp.cursor == 10
        assert vp.start == 1
        assert list(vp.visible) == list(range(1, 11))

    def test_scrolls_up_at_top_edge(self):
        """Moving above the window pulls it up to the cursor."""
        vp = Viewport(20, height=10, cursor=15)
        assert vp.start == 6

        for _ in range(9):
            vp.move_up()

        assert vp.cursor == 6
        assert vp.start == 6
        vp.move_up()
        assert vp.start == 5

    def test_boundaries_do_not_wrap(self):
        """Up at the top and down at the bottom are no-ops."""
        vp = Viewport(3, height=10)
        vp.move_up()
        assert vp.cursor == 0

        vp.end_of_list()
        vp.move_down()
        assert vp.cursor == 2

    def test_home_and_end(self):
        """Home and End jump to the ends of the list."""
        vp = Viewport(25, height=10, cursor=12)

        vp.end_of_list()
        assert (vp.cursor, vp.start) == (24, 15)

        vp.home()
        assert (vp.cursor, vp.start) == (0, 0)

    def test_jump_scrolls_minimally(self):
        """jump() only moves the window as far as needed."""
        vp = Viewport(30, height=10)
        vp.jump(14)
        assert vp.start == 5
        vp.jump(99)
        assert vp.cursor == 29

    def test_invariants_hold_through_walk(self):
        """Any walk over the list keeps the window around the cursor."""
        vp = Viewport(17, height=5)
        for step in ["down"] * 20 + ["up"] * 9 + ["end", "up", "home", "down"]:
            {
                "down": vp.move_down,
                "up": vp.move_up,
                "home": vp.home,
                "end": vp.end_of_list,
            }[step]()
            assert_invariants(vp)


class TestViewportIndicators:
    """Tests for the hidden-row counts."""

    def test_short_list_has_no_indicators(self):
        """A list that fits has nothing hidden."""
        vp = Viewport(4, height=10)
        assert not vp.more_above
        assert not vp.more_below
        assert vp.end == 4

    def test_hidden_counts(self):
        """Rows outside the window are counted on each side."""
        vp = Viewport(20, height=10, cursor=12)
        assert vp.more_above and vp.more_below
        assert vp.hidden_above == 3
        assert vp.hidden_below == 7


class TestViewportValidation:
    """Tests for construction errors."""

    def test_empty_list_rejected(self):
        """Zero items raise EmptyItemList."""
        with pytest.raises(EmptyItemList):
            Viewport(0)

    def test_bad_height_rejected(self):
        """Height must be at least one row."""
        with pytest.raises(ValueError):
            Viewport(5, height=0)

    def test_cursor_clamped(self):
        """An out of range starting cursor is clamped into the list."""
        vp = Viewport(5, height=3, cursor=40)
        assert vp.cursor == 4
        assert_invariants(vp)
