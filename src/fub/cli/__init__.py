"""CLI entry point for fub.

Uses Typer for command routing with lazy loading for performance.
Selections go to stdout so scripts can capture them; exit codes follow
the menu contract (0 selected, 130 quit, 126 help).
"""

from typing import List, Optional

import typer

__all__ = ["app", "main"]

app = typer.Typer(
    name="fub",
    help="Terminal menus, confirmations and progress feedback",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    non_interactive: bool = typer.Option(
        False,
        "--non-interactive",
        "-n",
        help="Never prompt; every command answers with its default.",
    ),
) -> None:
    """Terminal interaction engine."""
    ctx.obj = {"non_interactive": non_interactive}


def _config(ctx: typer.Context):
    from fub.cli.commands import load_config

    return load_config((ctx.obj or {}).get("non_interactive", False))


@app.command()
def select(
    ctx: typer.Context,
    options: List[str] = typer.Argument(..., help="Menu items, in order"),
    title: str = typer.Option("Select an option", "--title", "-t"),
    default: int = typer.Option(1, "--default", "-d", help="1-based default item"),
    no_quit: bool = typer.Option(False, "--no-quit", help="Disable q to quit"),
    help_key: bool = typer.Option(False, "--help-key", help="Enable h for help"),
) -> None:
    """Pick one option; prints it."""
    from fub.cli.commands import cmd_select

    raise typer.Exit(
        cmd_select(_config(ctx), options, title, default - 1, not no_quit, help_key)
    )


@app.command()
def multiselect(
    ctx: typer.Context,
    options: List[str] = typer.Argument(..., help="Menu items, in order"),
    title: str = typer.Option("Select options", "--title", "-t"),
    default: Optional[List[str]] = typer.Option(
        None, "--default", "-d", help="Preselected option (repeatable)"
    ),
    no_all: bool = typer.Option(False, "--no-all", help="Disable a (toggle all)"),
    no_none: bool = typer.Option(False, "--no-none", help="Disable n (deselect all)"),
) -> None:
    """Pick any number of options; prints them one per line."""
    from fub.cli.commands import cmd_multiselect

    raise typer.Exit(
        cmd_multiselect(
            _config(ctx), options, title, default or [], not no_all, not no_none
        )
    )


@app.command()
def confirm(
    ctx: typer.Context,
    message: str,
    warning: Optional[str] = typer.Option(None, "--warning", "-w"),
    default_yes: bool = typer.Option(False, "--default-yes", "-y"),
    expert: bool = typer.Option(False, "--expert", help="Show expert-mode banner"),
) -> None:
    """Ask yes/no; exit 0 for yes, 1 for no."""
    from fub.cli.commands import cmd_confirm

    raise typer.Exit(cmd_confirm(_config(ctx), message, warning, default_yes, expert))


@app.command()
def spin(
    ctx: typer.Context,
    command: List[str] = typer.Argument(..., help="Command to run (after --)"),
    message: str = typer.Option("Working...", "--message", "-m"),
) -> None:
    """Run a command behind a spinner; exits with its status."""
    from fub.cli.commands import cmd_spin

    raise typer.Exit(cmd_spin(_config(ctx), command, message))


@app.command()
def progress(
    ctx: typer.Context,
    total: int = typer.Argument(..., help="Number of steps"),
    message: str = typer.Option("Processing...", "--message", "-m"),
    delay: float = typer.Option(0.05, "--delay", help="Seconds per step"),
) -> None:
    """Demo the progress bar."""
    from fub.cli.commands import cmd_progress

    cmd_progress(_config(ctx), total, message, delay)


@app.command()
def config(ctx: typer.Context) -> None:
    """Show resolved configuration."""
    from fub.cli.commands import cmd_config

    cmd_config(_config(ctx))


def cli_main() -> None:
    """Entry point for pyproject.toml scripts."""
    app()


if __name__ == "__main__":
    cli_main()
