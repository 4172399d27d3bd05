"""Screen primitives shared by the native renderer and feedback widgets."""

from typing import Optional

from rich.console import Console

console = Console()


def format_scroll_indicator(hidden_above: int, hidden_below: int) -> tuple[str, str]:
    """Format scroll indicators.

    Returns:
        Tuple of (top_indicator, bottom_indicator)
    """
    top = f"⬆ {hidden_above} more above" if hidden_above > 0 else ""
    bottom = f"⬇ {hidden_below} more below" if hidden_below > 0 else ""
    return top, bottom


def clear_screen(target: Optional[Console] = None) -> None:
    """Clear terminal screen and hide cursor."""
    target = target or console
    target.file.write("\033[?25l")  # Hide cursor
    target.clear()


def reset_cursor(target: Optional[Console] = None) -> None:
    """Move cursor home and erase everything below it.

    The next frame is drawn over the old one, avoiding the flicker of a
    full clear.
    """
    target = target or console
    # \033[H = home (row 1, col 1), \033[J = erase to end of screen
    target.file.write("\033[H\033[J")
    target.file.flush()
