"""CLI command handlers.

Menus and dialogs draw on stderr so that ``choice=$(fub select ...)``
captures only the answer. Each handler returns the process exit code.
"""

import sys
import time
from functools import partial
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from fub.utils.config import Config, get_fub_dir
from fub.utils.exceptions import EmptyItemList, TerminalUnavailable

err_console = Console(stderr=True)


def load_config(non_interactive: bool = False) -> Config:
    """Resolve config from FUB_DIR, its env section and FUB_* variables."""
    config = Config(get_fub_dir())
    if non_interactive:
        config.interactive = False
    return config


def _menu(config: Config):
    from fub.cli.ui.menu import InteractiveMenu
    from fub.cli.ui.native import NativeBackend
    from fub.core.session import terminal_session

    native = NativeBackend(
        config,
        session_factory=partial(terminal_session, stream=sys.stderr),
        console=err_console,
    )
    return InteractiveMenu(config, native=native, output=sys.stderr)


def _fail(message: str) -> int:
    err_console.print(f"[red]Error:[/red] {message}", highlight=False)
    return 1


def cmd_select(
    config: Config,
    options: Sequence[str],
    title: str,
    default: int = 0,
    allow_quit: bool = True,
    allow_help: bool = False,
) -> int:
    """Print the chosen option. Exit 130 on quit, 126 on help."""
    from fub.core.selection import Outcome

    try:
        result = _menu(config).select(
            options,
            title=title,
            default=default,
            allow_quit=allow_quit,
            allow_help=allow_help,
        )
    except (EmptyItemList, TerminalUnavailable) as e:
        return _fail(str(e))

    if result.outcome in (Outcome.SELECTED, Outcome.DEFAULT):
        print(options[result.index])
        return 0
    return result.code


def cmd_multiselect(
    config: Config,
    options: Sequence[str],
    title: str,
    defaults: Sequence[str] = (),
    allow_select_all: bool = True,
    allow_select_none: bool = True,
) -> int:
    """Print chosen options one per line. Exit 130 on quit."""
    try:
        result = _menu(config).multiselect(
            options,
            defaults=defaults,
            title=title,
            allow_select_all=allow_select_all,
            allow_select_none=allow_select_none,
        )
    except (EmptyItemList, TerminalUnavailable) as e:
        return _fail(str(e))

    if result.cancelled:
        return result.code
    for item in result.items(options):
        print(item)
    return 0


def cmd_confirm(
    config: Config,
    message: str,
    warning: Optional[str] = None,
    default_yes: bool = False,
    expert: bool = False,
) -> int:
    """Exit 0 when confirmed, 1 otherwise."""
    confirmed = _menu(config).confirm(
        message, warning=warning, default=default_yes, require_expert=expert
    )
    return 0 if confirmed else 1


def cmd_spin(config: Config, command: Sequence[str], message: str) -> int:
    """Run ``command`` behind a spinner and pass its exit status through."""
    from fub.cli.ui.feedback import run_with_spinner

    try:
        return run_with_spinner(
            command, message, delay=config.spinner_delay, console=err_console
        )
    except OSError as e:
        return _fail(f"cannot run {command[0]}: {e}")


def cmd_progress(config: Config, total: int, message: str, delay: float) -> None:
    """Step a progress bar from 0 to ``total``."""
    from fub.cli.ui.feedback import show_progress

    for current in range(total + 1):
        show_progress(
            current, total, message, width=config.progress_width, console=err_console
        )
        if current < total:
            time.sleep(delay)


def cmd_config(config: Config) -> None:
    """Show resolved configuration."""
    from fub.cli.ui import console

    table = Table(title=f"fub config ({config.fub_dir})", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.as_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    overrides = config.list_env()
    if overrides:
        console.print()
        console.print("[bold]Env overrides:[/bold]")
        for key, value in overrides.items():
            console.print(f"  [cyan]{key}[/cyan]={value}", highlight=False)
