"""UI components: native renderer, external helper adapter, feedback widgets."""

from fub.cli.ui.base import RenderBackend
from fub.cli.ui.external import ExternalBackend, get_probe, scrubbed_environment
from fub.cli.ui.feedback import (
    run_with_spinner,
    show_operation_result,
    show_progress,
    spin_while,
)
from fub.cli.ui.menu import InteractiveMenu
from fub.cli.ui.native import NativeBackend
from fub.cli.ui.panels import (
    clear_screen,
    console,
    format_scroll_indicator,
)
from fub.cli.ui.render import DEFAULT_STYLE, MenuStyle

__all__ = [
    "DEFAULT_STYLE",
    "ExternalBackend",
    "InteractiveMenu",
    "MenuStyle",
    "NativeBackend",
    "RenderBackend",
    "clear_screen",
    "console",
    "format_scroll_indicator",
    "get_probe",
    "run_with_spinner",
    "scrubbed_environment",
    "show_operation_result",
    "show_progress",
    "spin_while",
]
