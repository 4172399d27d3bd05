"""Terminal session guard.

A TerminalSession switches the controlling terminal to cbreak/no-echo mode
and hides the cursor. Restoration runs on every way out: leaving the
``with`` block, an explicit ``release()``, SIGINT/SIGTERM/SIGHUP (the
previous handler runs afterwards) and interpreter exit.
"""

import atexit
import os
import signal
import sys
import threading
from contextlib import contextmanager
from typing import IO, Iterator, Optional

try:
    import termios
    import tty
except ImportError:  # Windows has no termios
    termios = None
    tty = None

from fub.utils.debug import debug_session, log_error
from fub.utils.exceptions import TerminalError, TerminalUnavailable

HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"


def _handled_signals() -> list[signal.Signals]:
    names = ("SIGINT", "SIGTERM", "SIGHUP")
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


def _fd_of(stream: Optional[IO]) -> Optional[int]:
    if stream is None:
        return None
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _isatty(stream: Optional[IO]) -> bool:
    try:
        return stream is not None and stream.isatty()
    except (AttributeError, ValueError):
        return False


def terminal_available(stdin: Optional[IO] = None, stdout: Optional[IO] = None) -> bool:
    """Whether stdin and stdout are both attached to a terminal."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    return termios is not None and _isatty(stdin) and _isatty(stdout)


class TerminalSession:
    """Scoped raw-mode acquisition of the controlling terminal.

    Only one session may be active per process. Use ``terminal_session()``
    to share an already active session with nested callers.
    """

    _active: Optional["TerminalSession"] = None

    def __init__(self, fd: Optional[int] = None, stream: Optional[IO] = None):
        self._fd = fd
        self.stream = stream if stream is not None else sys.stdout
        self._saved_attrs: Optional[list] = None
        self._previous_handlers: dict[int, object] = {}
        self.acquired = False

    @classmethod
    def active(cls) -> Optional["TerminalSession"]:
        """The session currently holding the terminal, if any."""
        return cls._active

    @property
    def fd(self) -> int:
        if self._fd is None:
            fd = _fd_of(sys.stdin)
            if fd is None:
                raise TerminalUnavailable("stdin has no file descriptor")
            self._fd = fd
        return self._fd

    def acquire(self) -> "TerminalSession":
        """Switch to cbreak/no-echo mode and hide the cursor.

        Raises:
            TerminalUnavailable: no TTY or no raw-mode support
            TerminalError: another session is already active
        """
        if self.acquired:
            return self
        if TerminalSession._active is not None:
            raise TerminalError("a terminal session is already active")
        if termios is None or tty is None:
            raise TerminalUnavailable("raw terminal mode is not supported here")

        fd = self.fd
        if not os.isatty(fd) or not _isatty(self.stream):
            raise TerminalUnavailable("stdin/stdout is not a terminal")

        try:
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd, termios.TCSANOW)
        except termios.error as e:
            raise TerminalUnavailable(f"cannot change terminal mode: {e}") from e

        self.acquired = True
        TerminalSession._active = self
        self._write(HIDE_CURSOR)
        self._install_signal_handlers()
        debug_session("terminal acquired", fd=fd)
        return self

    def release(self) -> None:
        """Restore echo, cooked mode and the cursor. Safe to call twice."""
        if not self.acquired:
            return
        self.acquired = False
        if TerminalSession._active is self:
            TerminalSession._active = None

        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
        except termios.error as e:
            log_error("session", "failed to restore terminal attributes", e)
        self._write(SHOW_CURSOR)
        self._restore_signal_handlers()
        debug_session("terminal released", fd=self.fd)

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text)
            self.stream.flush()
        except (OSError, ValueError):
            pass  # Stream already closed during shutdown

    def _install_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in _handled_signals():
            previous = signal.getsignal(signum)
            if previous in (signal.SIG_IGN, None):
                continue
            self._previous_handlers[signum] = previous
            signal.signal(signum, self._on_signal)

    def _restore_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum, previous in self._previous_handlers.items():
            if signal.getsignal(signum) == self._on_signal:
                signal.signal(signum, previous)
        self._previous_handlers = {}

    def _on_signal(self, signum: int, frame) -> None:
        previous = self._previous_handlers.get(signum, signal.SIG_DFL)
        debug_session("signal received, restoring terminal", signum=signum)
        self.release()
        if callable(previous):
            previous(signum, frame)
        else:
            signal.raise_signal(signum)

    def __enter__(self) -> "TerminalSession":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


@contextmanager
def terminal_session(
    fd: Optional[int] = None, stream: Optional[IO] = None
) -> Iterator[TerminalSession]:
    """Hold the terminal for the duration of the block.

    Nested calls reuse the outer session and leave its release to the
    outer block.
    """
    active = TerminalSession.active()
    if active is not None:
        yield active
        return
    with TerminalSession(fd, stream) as session:
        yield session


def _release_active() -> None:
    session = TerminalSession.active()
    if session is not None:
        session.release()


atexit.register(_release_active)
