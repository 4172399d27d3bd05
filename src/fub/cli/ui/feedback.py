"""Progress feedback: spinner, progress bar and result banners."""

import subprocess
import time
from typing import Optional, Sequence

from rich.console import Console
from rich.control import Control
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from fub.cli.ui import panels
from fub.cli.ui.render import styled
from fub.utils.constants import (
    DEFAULT_PROGRESS_WIDTH,
    DEFAULT_SPINNER_DELAY,
    SPINNER_FRAMES,
)

RESULT_STYLES: dict[str, tuple[str, str, str]] = {
    # result -> (border style, icon, suffix)
    "success": ("green", "✓", "completed successfully"),
    "ok": ("green", "✓", "completed successfully"),
    "completed": ("green", "✓", "completed successfully"),
    "error": ("red", "✗", "failed"),
    "failed": ("red", "✗", "failed"),
    "failure": ("red", "✗", "failed"),
    "warning": ("yellow", "⚠", "completed with warnings"),
    "partial": ("yellow", "⚠", "completed with warnings"),
}


def spin_while(
    process: subprocess.Popen,
    message: str,
    delay: float = DEFAULT_SPINNER_DELAY,
    console: Optional[Console] = None,
    frames: Sequence[str] = SPINNER_FRAMES,
) -> int:
    """Draw a spinner until ``process`` exits.

    Liveness is polled every ``delay`` seconds. The spinner line is removed
    when the process finishes.

    Returns:
        The process exit code
    """
    console = console or panels.console
    index = 0
    with Live(console=console, auto_refresh=False, transient=True) as live:
        while process.poll() is None:
            line = Text.assemble((message, "bold blue"), " ", frames[index])
            live.update(line, refresh=True)
            time.sleep(delay)
            index = (index + 1) % len(frames)
    return process.returncode


def run_with_spinner(
    argv: Sequence[str],
    message: str,
    delay: float = DEFAULT_SPINNER_DELAY,
    console: Optional[Console] = None,
) -> int:
    """Run ``argv`` with its output discarded, spinning meanwhile.

    An interrupt terminates and reaps the child before propagating.
    """
    process = subprocess.Popen(
        list(argv), stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
    )
    try:
        return spin_while(process, message, delay=delay, console=console)
    finally:
        if process.poll() is None:
            process.terminate()
            process.wait()


def format_progress(
    current: int, total: int, message: str, width: int = DEFAULT_PROGRESS_WIDTH
) -> str:
    """``message  NN% [███░░░]`` for ``current`` out of ``total``."""
    if total <= 0:
        current, total = 1, 1
    current = min(max(current, 0), total)
    percentage = current * 100 // total
    filled = current * width // total
    bar = "█" * filled + "░" * (width - filled)
    return f"{message} {percentage:3d}% [{bar}]"


def show_progress(
    current: int,
    total: int,
    message: str = "Processing...",
    width: int = DEFAULT_PROGRESS_WIDTH,
    console: Optional[Console] = None,
) -> None:
    """Redraw the progress line in place; ends the line once complete."""
    console = console or panels.console
    console.control(Control.move_to_column(0))
    line = format_progress(current, total, message, width)
    name, rest = line[: len(message)], line[len(message) :]
    console.print(styled("bold blue", name) + styled("", rest), end="", highlight=False)
    if current >= total:
        console.print()


def show_operation_result(
    operation: str,
    result: str,
    details: str = "",
    console: Optional[Console] = None,
) -> None:
    """Print a boxed success/error/warning/info banner for an operation."""
    console = console or panels.console
    border, icon, suffix = RESULT_STYLES.get(result, ("blue", "ℹ", ""))
    text = f"{icon} {operation} {suffix}".rstrip()

    console.print()
    console.print(
        Panel(
            styled(f"bold {border}", text),
            border_style=border,
            padding=(1, 2),
            expand=False,
        )
    )
    if details:
        console.print()
        console.print(styled("bright_black", details), highlight=False)
    console.print()
