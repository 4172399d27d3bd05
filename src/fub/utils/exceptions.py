"""Custom exceptions for fub.

This module defines a hierarchy of exceptions for the interaction engine:
- FubError: Base exception for all fub errors
- TerminalError: Terminal mode related errors
- TerminalUnavailable: No TTY or no raw-mode primitive
- AmbiguousSequence: Escape sequence timed out mid-decode (internal)
- ExternalBackendFailure: External helper failed (internal, triggers fallback)
- EmptyItemList: A menu was invoked with no items
"""

from typing import Optional


class FubError(Exception):
    """Base exception for all fub errors.

    All fub-specific exceptions inherit from this class, allowing
    callers to catch all fub errors with a single except clause.
    """

    pass


class TerminalError(FubError):
    """Terminal mode related errors."""

    pass


class TerminalUnavailable(TerminalError):
    """Raised when an interactive call cannot get a usable terminal.

    Raised when:
    - stdin or stdout is not a TTY
    - the platform has no termios raw-mode primitive

    Callers can recover by falling back to their default choice.
    """

    pass


class AmbiguousSequence(FubError):
    """An escape sequence did not complete within its timeout.

    Never surfaced to callers: the decoder turns it into an UNKNOWN key.
    """

    def __init__(self, message: str, partial: bytes = b""):
        super().__init__(message)
        self.partial = partial


class ExternalBackendFailure(FubError):
    """The external interactive helper could not produce a result.

    Attributes:
        returncode: Exit status of the helper, None if it never ran
    """

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class EmptyItemList(FubError, ValueError):
    """A menu was invoked with zero items (programming error)."""

    pass
