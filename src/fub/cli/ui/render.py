"""Full-frame rendering of menus and dialogs.

Frame builders are pure: they turn state into a list of rich renderables.
``paint`` then redraws the whole frame; there are no partial updates.
"""

import io
from dataclasses import dataclass
from typing import Optional

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.panel import Panel

from fub.cli.ui.panels import clear_screen, console, format_scroll_indicator, reset_cursor
from fub.core.selection import MenuState, MultiMenuState

Frame = list[RenderableType]


@dataclass(frozen=True)
class MenuStyle:
    """Pre-resolved rich style strings. Theme lookup happens elsewhere."""

    title: str = "bold cyan"
    rule: str = "bright_black"
    help: str = "bright_black"
    highlight: str = "bold white on blue"
    number: str = "bright_black"
    checked: str = "green"
    summary: str = "cyan"
    indicator: str = "cyan"
    message: str = "bold white"
    warning: str = "bold yellow"
    danger: str = "bold red"


DEFAULT_STYLE = MenuStyle()


def styled(style: str, text: str) -> str:
    """Markup for ``text`` in ``style``, with ``text`` escaped."""
    if not style:
        return escape(text)
    return f"[{style}]{escape(text)}[/]"


def _header(title: str, style: MenuStyle) -> Frame:
    return [
        "",
        styled(style.title, title),
        styled(style.rule, "─" * len(title)),
        "",
    ]


def _legend(parts: list[str], style: MenuStyle) -> Frame:
    return [styled(style.help, " • ".join(parts)), ""]


def _window(state: MenuState, style: MenuStyle, row) -> Frame:
    """Visible rows wrapped in scroll indicators."""
    viewport = state.viewport
    top, bottom = format_scroll_indicator(viewport.hidden_above, viewport.hidden_below)
    lines: Frame = []
    if top:
        lines.append(styled(style.indicator, f"  {top}"))
    for i in viewport.visible:
        lines.append(row(i))
    if bottom:
        lines.append(styled(style.indicator, f"  {bottom}"))
    return lines


def render_menu(
    state: MenuState,
    title: str,
    style: MenuStyle = DEFAULT_STYLE,
    scroll_threshold: int = 0,
) -> Frame:
    """Frame for a single-select menu."""
    legend = ["↑↓ navigate", "Enter select", "1-9 jump"]
    if state.allow_quit:
        legend.append("q quit")
    if state.allow_help:
        legend.append("h help")

    def row(i: int) -> str:
        label = f"{i + 1}. {state.items[i]}"
        if i == state.cursor:
            return f" {styled(style.highlight, f' {label} ')}"
        return f" {styled(style.number, f'{i + 1}.')} {escape(state.items[i])}"

    lines = _header(title, style) + _legend(legend, style) + _window(state, style, row)
    lines.append("")
    if scroll_threshold and len(state.items) > scroll_threshold:
        lines.append(styled(style.help, f"{state.cursor + 1}/{len(state.items)}"))
    return lines


def render_multiselect(
    state: MultiMenuState,
    title: str,
    style: MenuStyle = DEFAULT_STYLE,
    scroll_threshold: int = 0,
) -> Frame:
    """Frame for a multi-select menu with checkboxes and a summary line."""
    legend = ["↑↓ navigate", "Space toggle", "Enter confirm"]
    if state.allow_select_all:
        legend.append("a toggle all")
    if state.allow_select_none:
        legend.append("n deselect all")
    legend.append("q quit")

    def row(i: int) -> str:
        box = "[✓]" if i in state.selected else "[ ]"
        if i == state.cursor:
            return f" {styled(style.highlight, f'{box} {state.items[i]} ')}"
        if i in state.selected:
            return f" {styled(style.checked, box)} {escape(state.items[i])}"
        return f" {escape(box)} {escape(state.items[i])}"

    lines = _header(title, style) + _legend(legend, style) + _window(state, style, row)
    lines.append("")
    if state.selected:
        lines.append(styled(style.summary, f"Selected: {len(state.selected)} option(s)"))
    else:
        lines.append(styled(style.help, "No options selected"))
    if scroll_threshold and len(state.items) > scroll_threshold:
        lines.append(styled(style.help, f"{state.cursor + 1}/{len(state.items)}"))
    return lines


def render_confirm(
    message: str,
    warning: Optional[str] = None,
    default: bool = False,
    require_expert: bool = False,
    style: MenuStyle = DEFAULT_STYLE,
) -> Frame:
    """Frame for the confirmation dialog, ending with the y/n prompt."""
    lines: Frame = [
        "",
        Panel(
            styled(style.warning, "⚠ CONFIRMATION REQUIRED"),
            border_style=style.warning,
            width=66,
        ),
        "",
        styled(style.message, message),
    ]
    if warning:
        lines += ["", styled(style.warning, f"WARNING: {warning}")]
    if require_expert:
        lines += [
            "",
            styled(
                style.danger,
                "EXPERT MODE REQUIRED: This operation can cause system instability!",
            ),
        ]
    lines.append("")
    lines.append(styled(style.warning, "Continue? [Y/n]" if default else "Continue? [y/N]"))
    return lines


def render_help(text: str, title: str, style: MenuStyle = DEFAULT_STYLE) -> Frame:
    """Frame for the native help pager."""
    lines: Frame = [
        "",
        styled(style.title, title),
        styled(style.rule, "═" * max(len(title), 40)),
        "",
    ]
    lines += [escape(line) for line in text.splitlines()]
    lines += ["", styled(style.help, "Press any key to return...")]
    return lines


def paint(frame: Frame, target: Optional[Console] = None, clear: bool = False) -> None:
    """Redraw the whole screen with ``frame``.

    Args:
        frame: Renderables, one per line
        target: Console to draw on
        clear: Clear the screen first (first frame) instead of overdrawing
    """
    target = target or console
    if clear:
        clear_screen(target)
    else:
        reset_cursor(target)
    for line in frame:
        target.print(line, highlight=False)


def render_lines(frame: Frame, width: int = 80) -> str:
    """Plain-text rendering of a frame (no colors)."""
    capture = Console(width=width, record=True, color_system=None, file=io.StringIO())
    for line in frame:
        capture.print(line, highlight=False)
    return capture.export_text()

