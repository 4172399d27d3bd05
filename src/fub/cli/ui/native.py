"""Native render backend: render, read a key, update state, repeat."""

from contextlib import AbstractContextManager
from typing import Callable, Optional, Sequence

from rich.console import Console

from fub.cli.ui import panels
from fub.cli.ui.render import (
    DEFAULT_STYLE,
    MenuStyle,
    paint,
    render_confirm,
    render_help,
    render_menu,
    render_multiselect,
    styled,
)
from fub.core.keys import FdByteReader, Key, KeyDecoder
from fub.core.selection import MenuResult, MenuState, MultiMenuState
from fub.core.session import TerminalSession, terminal_session
from fub.utils.config import Config
from fub.utils.debug import debug_menu

SessionFactory = Callable[[], AbstractContextManager]


class NativeBackend:
    """Menus drawn directly on the terminal with rich.

    Args:
        config: Resolved configuration (menu height, timeout, ...)
        decoder: Key source; by default one is built on the session's fd
        session_factory: Returns the context manager that holds the terminal
        console: Where frames are drawn
        style: Pre-resolved styles
    """

    name = "native"

    def __init__(
        self,
        config: Optional[Config] = None,
        decoder: Optional[KeyDecoder] = None,
        session_factory: SessionFactory = terminal_session,
        console: Optional[Console] = None,
        style: MenuStyle = DEFAULT_STYLE,
    ):
        self.config = config or Config()
        self._decoder = decoder
        self._session_factory = session_factory
        self.console = console or panels.console
        self.style = style

    def _decoder_for(self, session: Optional[TerminalSession]) -> KeyDecoder:
        if self._decoder is not None:
            return self._decoder
        return KeyDecoder(FdByteReader(session.fd))

    def _timeout(self) -> Optional[float]:
        timeout = self.config.timeout_seconds
        return timeout if timeout and timeout > 0 else None

    def select(
        self,
        items: Sequence[str],
        title: str = "",
        cursor: int = 0,
        allow_quit: bool = True,
        allow_help: bool = False,
    ) -> MenuResult:
        state = MenuState.create(
            items,
            cursor=cursor,
            height=self.config.menu_height,
            allow_quit=allow_quit,
            allow_help=allow_help,
        )
        with self._session_factory() as session:
            result = self._select_loop(
                state, title, self._decoder_for(session), state.cursor
            )
            self.console.clear()
        debug_menu("select finished", outcome=result.outcome.value, index=result.index)
        return result

    def _select_loop(
        self, state: MenuState, title: str, decoder: KeyDecoder, default: int
    ) -> MenuResult:
        clear = True
        while True:
            frame = render_menu(state, title, self.style, self.config.scroll_threshold)
            paint(frame, self.console, clear=clear)
            clear = False

            event = decoder.read_key(self._timeout())
            if event is None or decoder.input_unavailable:
                return MenuResult.default(index=default)

            if state.move(event.key):
                continue
            if event.key is Key.ENTER:
                return state.result()
            if event.key is Key.QUIT and state.allow_quit:
                return MenuResult.quit()
            if event.key is Key.HELP and state.allow_help:
                return MenuResult.help()
            if event.key is Key.REFRESH:
                clear = True
            elif event.key is Key.DIGIT:
                index = decoder.read_number(event) - 1
                if 0 <= index < len(state.items):
                    return MenuResult.selected(index)

    def multiselect(
        self,
        items: Sequence[str],
        title: str = "",
        selected: frozenset[int] = frozenset(),
        allow_select_all: bool = True,
        allow_select_none: bool = True,
    ) -> MenuResult:
        state = MultiMenuState.create(
            items,
            height=self.config.menu_height,
            selected=set(selected),
            allow_select_all=allow_select_all,
            allow_select_none=allow_select_none,
        )
        with self._session_factory() as session:
            result = self._multiselect_loop(state, title, self._decoder_for(session))
            self.console.clear()
        debug_menu(
            "multiselect finished",
            outcome=result.outcome.value,
            count=len(result.indices),
        )
        return result

    def _multiselect_loop(
        self, state: MultiMenuState, title: str, decoder: KeyDecoder
    ) -> MenuResult:
        defaults = frozenset(state.selected)
        clear = True
        while True:
            frame = render_multiselect(
                state, title, self.style, self.config.scroll_threshold
            )
            paint(frame, self.console, clear=clear)
            clear = False

            event = decoder.read_key(self._timeout())
            if event is None or decoder.input_unavailable:
                return MenuResult.default(indices=defaults)

            if state.move(event.key):
                continue
            if event.key is Key.SPACE:
                state.toggle()
            elif event.key is Key.ENTER:
                return state.result()
            elif event.key is Key.QUIT:
                return MenuResult.quit()
            elif event.key is Key.REFRESH:
                clear = True
            elif event.key is Key.CHAR and event.char in ("a", "A"):
                state.toggle_all()
            elif event.key is Key.CHAR and event.char in ("n", "N"):
                state.select_none()

    def confirm(
        self,
        message: str,
        warning: Optional[str] = None,
        default: bool = False,
        require_expert: bool = False,
    ) -> bool:
        with self._session_factory() as session:
            decoder = self._decoder_for(session)
            paint(
                render_confirm(message, warning, default, require_expert, self.style),
                self.console,
                clear=True,
            )
            while True:
                event = decoder.read_key(self._timeout())
                if event is None or decoder.input_unavailable:
                    return default
                if event.key is Key.ENTER:
                    return default
                if event.key is Key.CHAR and event.char in ("y", "Y"):
                    return True
                if event.key is Key.CHAR and event.char in ("n", "N"):
                    return False
                self.console.print(
                    styled(self.style.danger, "Please answer yes or no."),
                    highlight=False,
                )

    def pager(self, text: str, title: str = "Help") -> None:
        with self._session_factory() as session:
            decoder = self._decoder_for(session)
            paint(render_help(text, title, self.style), self.console, clear=True)
            decoder.read_key()
            self.console.clear()
