"""Decode raw terminal bytes into logical key events.

Input arrives one byte at a time from a ByteReader. An Escape byte starts a
short bounded read to tell a bare Escape apart from a CSI sequence such as
the arrow keys. A CSI sequence is consumed up to its final byte, so modified
keys like Ctrl+Up never leak digits or letters into the next read; anything
unbound or incomplete decodes to UNKNOWN.
"""

import os
import select
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

import readchar

from fub.utils.constants import DIGIT_TIMEOUT, ESCAPE_TIMEOUT, MAX_ESCAPE_LENGTH
from fub.utils.debug import debug_keys
from fub.utils.exceptions import AmbiguousSequence


class Key(Enum):
    """Logical keys understood by the menus."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    SPACE = "space"
    TAB = "tab"
    BACKSPACE = "backspace"
    QUIT = "quit"
    HELP = "help"
    REFRESH = "refresh"
    DIGIT = "digit"
    CHAR = "char"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key. DIGIT and CHAR events carry their character."""

    key: Key
    char: str = ""

    @property
    def digit(self) -> Optional[int]:
        """Numeric value of a DIGIT event."""
        if self.key is Key.DIGIT:
            return int(self.char)
        return None

    @property
    def is_number(self) -> bool:
        """True for any 0-9 keystroke (a bare '0' decodes as CHAR)."""
        return self.key is Key.DIGIT or (self.key is Key.CHAR and self.char == "0")


UNKNOWN = KeyEvent(Key.UNKNOWN)

# Complete escape sequences, keyed by their text
_SEQUENCES: dict[str, Key] = {
    readchar.key.UP: Key.UP,
    readchar.key.DOWN: Key.DOWN,
    readchar.key.RIGHT: Key.RIGHT,
    readchar.key.LEFT: Key.LEFT,
    readchar.key.HOME: Key.HOME,
    readchar.key.END: Key.END,
    "\x1b[1~": Key.HOME,
    "\x1b[4~": Key.END,
    # Application cursor mode
    "\x1bOA": Key.UP,
    "\x1bOB": Key.DOWN,
    "\x1bOC": Key.RIGHT,
    "\x1bOD": Key.LEFT,
}

# Single characters with a meaning of their own
_SINGLE: dict[str, Key] = {
    readchar.key.CR: Key.ENTER,
    readchar.key.LF: Key.ENTER,
    readchar.key.BACKSPACE: Key.BACKSPACE,
    readchar.key.CTRL_H: Key.BACKSPACE,
    readchar.key.TAB: Key.TAB,
    readchar.key.SPACE: Key.SPACE,
    "q": Key.QUIT,
    "Q": Key.QUIT,
    "h": Key.HELP,
    "H": Key.HELP,
    "r": Key.REFRESH,
    "R": Key.REFRESH,
}


class ByteReader(Protocol):
    """Source of input bytes."""

    def read(self, timeout: Optional[float]) -> Optional[bytes]:
        """Return one byte, b"" at end of input, or None if the timeout expired."""
        ...


class FdByteReader:
    """Unbuffered single-byte reads from a file descriptor."""

    def __init__(self, fd: int):
        self.fd = fd

    def read(self, timeout: Optional[float]) -> Optional[bytes]:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        return os.read(self.fd, 1)


class KeyDecoder:
    """Turns a ByteReader into KeyEvents.

    Read failures never raise: they produce UNKNOWN and set
    ``input_unavailable`` so callers can fall back to their default.
    Ctrl+C (delivered as a byte when ISIG is off) raises KeyboardInterrupt.
    """

    def __init__(
        self,
        reader: ByteReader,
        escape_timeout: float = ESCAPE_TIMEOUT,
        digit_timeout: float = DIGIT_TIMEOUT,
    ):
        self.reader = reader
        self.escape_timeout = escape_timeout
        self.digit_timeout = digit_timeout
        self.input_unavailable = False
        self._pending: list[KeyEvent] = []
        # A byte read while probing an escape that belongs to the next key
        self._held_byte: Optional[bytes] = None

    def unread(self, event: KeyEvent) -> None:
        """Push an event back so the next read_key returns it."""
        self._pending.append(event)

    def _read_byte(self, timeout: Optional[float]) -> Optional[bytes]:
        if self._held_byte is not None:
            data, self._held_byte = self._held_byte, None
            return data
        if self.input_unavailable:
            return b""
        try:
            data = self.reader.read(timeout)
        except (OSError, ValueError) as e:
            debug_keys("input read failed", error=str(e))
            self.input_unavailable = True
            return b""
        if data == b"":
            debug_keys("input closed")
            self.input_unavailable = True
        return data

    def read_key(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Read one key.

        Args:
            timeout: Seconds to wait for the first byte, None blocks

        Returns:
            The decoded event, or None if the timeout expired first
        """
        if self._pending:
            return self._pending.pop()

        data = self._read_byte(timeout)
        if data is None:
            return None
        if not data:
            return UNKNOWN

        if data == readchar.key.ESC.encode():
            try:
                return self._decode_escape()
            except AmbiguousSequence as e:
                debug_keys("unfinished escape sequence", partial=repr(e.partial))
                return UNKNOWN

        char = self._decode_char(data)
        if char == readchar.key.CTRL_C:
            raise KeyboardInterrupt
        return self._classify(char)

    def _decode_escape(self) -> KeyEvent:
        seq = b"\x1b"
        data = self._read_byte(self.escape_timeout)
        if not data:
            raise AmbiguousSequence("escape sequence timed out", seq)
        if data not in (b"[", b"O"):
            # Alt+key or Escape then a key: the key still counts
            self._held_byte = data
            return UNKNOWN
        seq += data

        # SS3 is one final byte; CSI runs until a byte in 0x40-0x7E
        while len(seq) < MAX_ESCAPE_LENGTH:
            data = self._read_byte(self.escape_timeout)
            if not data:
                raise AmbiguousSequence("escape sequence timed out", seq)
            seq += data
            if seq[1:2] == b"O" or 0x40 <= data[0] <= 0x7E:
                break
        else:
            debug_keys("overlong escape sequence", seq=repr(seq))
            return UNKNOWN

        key = _SEQUENCES.get(seq.decode("ascii", errors="replace"))
        if key is None:
            debug_keys("unbound escape sequence", seq=repr(seq))
            return UNKNOWN
        return KeyEvent(key)

    def _decode_char(self, data: bytes) -> str:
        lead = data[0]
        if lead < 0xC0:
            return data.decode("latin-1") if lead < 0x80 else "�"
        # UTF-8 lead byte: pull in the continuation bytes
        extra = 1 if lead < 0xE0 else 2 if lead < 0xF0 else 3
        for _ in range(extra):
            more = self._read_byte(self.escape_timeout)
            if not more:
                break
            data += more
        return data.decode("utf-8", errors="replace")

    def _classify(self, char: str) -> KeyEvent:
        key = _SINGLE.get(char)
        if key is not None:
            return KeyEvent(key)
        if char in "123456789":
            return KeyEvent(Key.DIGIT, char)
        return KeyEvent(Key.CHAR, char)

    def read_number(self, first: KeyEvent) -> int:
        """Collect a multi-digit number that starts with ``first``.

        Each further digit must arrive within ``digit_timeout``. The key
        that ends the run, if any, is pushed back.
        """
        number = first.char
        while True:
            event = self.read_key(self.digit_timeout)
            if event is None:
                break
            if not event.is_number:
                if not self.input_unavailable:
                    self.unread(event)
                break
            number += event.char
        return int(number)
