"""InteractiveMenu: the entry point callers use for menus and dialogs."""

from typing import IO, Iterable, Optional, Sequence, Union

from fub.cli.ui.base import RenderBackend
from fub.cli.ui.external import BackendProbe, ExternalBackend, get_probe
from fub.cli.ui.native import NativeBackend
from fub.core.selection import MenuResult, resolve_defaults
from fub.core.session import terminal_available
from fub.utils.config import Config
from fub.utils.debug import debug_backend
from fub.utils.exceptions import EmptyItemList, ExternalBackendFailure, TerminalUnavailable


class InteractiveMenu:
    """Menus with an optional external helper and a native fallback.

    Non-interactive configs get their default back without touching the
    terminal. With a terminal, the external helper is tried first when it
    is enabled and healthy; any ExternalBackendFailure redoes the same call
    natively.

    Args:
        config: Resolved configuration
        native: Native backend (built from config by default)
        external: External helper backend
        probe: Availability cache for the external helper
        output: Stream the menus draw on (stdout by default)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        native: Optional[RenderBackend] = None,
        external: Optional[RenderBackend] = None,
        probe: Optional[BackendProbe] = None,
        output: Optional[IO] = None,
    ):
        self.config = config or Config()
        self.native = native or NativeBackend(self.config)
        self.external = external or ExternalBackend(self.config.external_command)
        self.probe = probe or get_probe(self.config.external_command)
        self.output = output

    def _use_external(self) -> bool:
        return bool(self.config.external_backend) and self.probe.available()

    def _delegate(self, operation: str, *args, **kwargs):
        if self._use_external():
            try:
                result = getattr(self.external, operation)(*args, **kwargs)
            except ExternalBackendFailure as e:
                self.probe.record_failure()
                debug_backend(
                    "external helper failed, using native",
                    operation=operation,
                    error=str(e),
                    returncode=e.returncode,
                )
            else:
                self.probe.record_success()
                return result
        return getattr(self.native, operation)(*args, **kwargs)

    def _require_terminal(self) -> None:
        if not terminal_available(stdout=self.output):
            raise TerminalUnavailable("stdin/stdout is not a terminal")

    def select(
        self,
        options: Sequence[str],
        title: str = "Select an option",
        default: int = 0,
        allow_quit: bool = True,
        allow_help: bool = False,
    ) -> MenuResult:
        """Show a single-select menu.

        Args:
            options: Item strings, in display order
            title: Header line
            default: Zero-based starting cursor (and non-interactive answer)
            allow_quit: Accept q as cancel
            allow_help: Accept h as a help request

        Returns:
            MenuResult; ``code`` is the index, 130 on quit, 126 on help

        Raises:
            EmptyItemList: options is empty
            TerminalUnavailable: interactive but no TTY
        """
        if not options:
            raise EmptyItemList("select() needs at least one option")
        default = min(max(default, 0), len(options) - 1)
        if not self.config.interactive:
            return MenuResult.default(index=default)
        self._require_terminal()
        return self._delegate(
            "select",
            options,
            title=title,
            cursor=default,
            allow_quit=allow_quit,
            allow_help=allow_help,
        )

    def multiselect(
        self,
        options: Sequence[str],
        defaults: Iterable[Union[int, str]] = (),
        title: str = "Select options",
        allow_select_all: bool = True,
        allow_select_none: bool = True,
    ) -> MenuResult:
        """Show a checkbox menu.

        ``defaults`` may hold indices or option strings. The result's
        ``indices`` is an unordered set; use ``MenuResult.items`` for the
        chosen strings in option order.
        """
        if not options:
            raise EmptyItemList("multiselect() needs at least one option")
        selected = frozenset(resolve_defaults(options, defaults))
        if not self.config.interactive:
            return MenuResult.default(indices=selected)
        self._require_terminal()
        return self._delegate(
            "multiselect",
            options,
            title=title,
            selected=selected,
            allow_select_all=allow_select_all,
            allow_select_none=allow_select_none,
        )

    def confirm(
        self,
        message: str,
        warning: Optional[str] = None,
        default: bool = False,
        require_expert: bool = False,
    ) -> bool:
        """Ask for confirmation. Never blocks without a terminal."""
        if not self.config.interactive or not terminal_available(stdout=self.output):
            return default
        try:
            return self._delegate(
                "confirm",
                message,
                warning=warning,
                default=default,
                require_expert=require_expert,
            )
        except TerminalUnavailable:
            return default

    def show_help(self, text: str, title: str = "Help") -> None:
        """Show help text until a key is pressed."""
        if not self.config.interactive or not terminal_available(stdout=self.output):
            return
        self._delegate("pager", text, title=title)
