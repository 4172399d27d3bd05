"""Tests for the terminal session guard."""

import io
import os
import signal
import sys

import pytest

from fub.core.session import TerminalSession, terminal_available, terminal_session
from fub.utils.exceptions import TerminalError, TerminalUnavailable

termios = pytest.importorskip("termios")
pty = pytest.importorskip("pty")


class TtyStream(io.StringIO):
    """In-memory output stream that claims to be a terminal."""

    def isatty(self):
        return True


@pytest.fixture
def pty_fd():
    """Slave side of a fresh pseudo-terminal."""
    master, slave = pty.openpty()
    yield slave
    os.close(slave)
    os.close(master)


@pytest.fixture(autouse=True)
def no_leftover_session():
    yield
    active = TerminalSession.active()
    if active is not None:
        active.release()


def echo_on(fd: int) -> bool:
    return bool(termios.tcgetattr(fd)[3] & termios.ECHO)


class TestAcquireRelease:
    """Tests for entering and leaving the session."""

    def test_echo_disabled_then_restored(self, pty_fd):
        """Echo is off inside the block and back on after it."""
        assert echo_on(pty_fd)
        with TerminalSession(pty_fd, TtyStream()):
            assert not echo_on(pty_fd)
        assert echo_on(pty_fd)

    def test_attributes_restored_exactly(self, pty_fd):
        """Release restores the saved attributes bit for bit."""
        before = termios.tcgetattr(pty_fd)
        with TerminalSession(pty_fd, TtyStream()):
            pass
        assert termios.tcgetattr(pty_fd) == before

    def test_restored_when_block_raises(self, pty_fd):
        """An exception inside the block still restores the terminal."""
        with pytest.raises(RuntimeError):
            with TerminalSession(pty_fd, TtyStream()):
                raise RuntimeError("boom")
        assert echo_on(pty_fd)
        assert TerminalSession.active() is None

    def test_cursor_hidden_and_shown(self, pty_fd):
        """The cursor is hidden on acquire and shown on release."""
        stream = TtyStream()
        with TerminalSession(pty_fd, stream):
            assert stream.getvalue() == "\033[?25l"
        assert stream.getvalue().endswith("\033[?25h")

    def test_release_twice_is_safe(self, pty_fd):
        """A second release is a no-op."""
        session = TerminalSession(pty_fd, TtyStream()).acquire()
        session.release()
        session.release()
        assert echo_on(pty_fd)


class TestExclusivity:
    """Tests for the one-session-per-process rule."""

    def test_second_session_rejected(self, pty_fd):
        """A second concurrent session raises TerminalError."""
        with TerminalSession(pty_fd, TtyStream()):
            with pytest.raises(TerminalError):
                TerminalSession(pty_fd, TtyStream()).acquire()

    def test_nested_helper_reuses_session(self, pty_fd):
        """terminal_session() inside a session yields the same session."""
        with terminal_session(pty_fd, TtyStream()) as outer:
            with terminal_session() as inner:
                assert inner is outer
            assert not echo_on(pty_fd)
        assert echo_on(pty_fd)


class TestUnavailable:
    """Tests for missing terminals."""

    def test_non_tty_fd(self, temp_dir):
        """A regular file is not a terminal."""
        with open(temp_dir / "input", "w+") as f:
            with pytest.raises(TerminalUnavailable):
                TerminalSession(f.fileno(), TtyStream()).acquire()
        assert TerminalSession.active() is None

    def test_non_tty_stream(self, pty_fd):
        """Output that is not a terminal is refused."""
        with pytest.raises(TerminalUnavailable):
            TerminalSession(pty_fd, io.StringIO()).acquire()

    def test_terminal_available_false_for_pipes(self):
        """Plain in-memory streams are not terminals."""
        assert not terminal_available(io.StringIO(), io.StringIO())


class TestSignals:
    """Tests for restoration on signals."""

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_signal_restores_then_chains(self, pty_fd):
        """A signal restores the terminal before the previous handler runs."""
        seen = []

        def previous(signum, frame):
            seen.append((signum, echo_on(pty_fd)))

        original = signal.signal(signal.SIGTERM, previous)
        try:
            with TerminalSession(pty_fd, TtyStream()):
                signal.raise_signal(signal.SIGTERM)
            assert seen == [(signal.SIGTERM, True)]
            assert signal.getsignal(signal.SIGTERM) is previous
        finally:
            signal.signal(signal.SIGTERM, original)


class TestMenuRestoresTerminal:
    """A menu run inside a real session leaves the terminal usable."""

    def test_quit_restores_echo(self, pty_fd, screen, decoder_for):
        """Quitting returns 130 with echo already back on."""
        from fub.cli.ui.native import NativeBackend

        backend = NativeBackend(
            decoder=decoder_for("q"),
            session_factory=lambda: terminal_session(pty_fd, TtyStream()),
            console=screen,
        )
        result = backend.select(["A", "B", "C"])

        assert result.code == 130
        assert echo_on(pty_fd)
        assert TerminalSession.active() is None
