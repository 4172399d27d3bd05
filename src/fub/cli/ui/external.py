"""External render backend: delegate menus to the gum helper.

Every call may raise ExternalBackendFailure; InteractiveMenu catches it
and redoes the call with the native backend.
"""

import os
import shutil
import subprocess
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from fub.core.selection import MenuResult
from fub.utils.constants import (
    DEFAULT_EXTERNAL_COMMAND,
    EXTERNAL_PROBE_TIMEOUT,
    EXTERNAL_STYLE_VARS,
    HELP_OPTION,
    MAX_EXTERNAL_FAILURES,
    QUIT_OPTION,
)
from fub.utils.debug import debug_backend
from fub.utils.exceptions import ExternalBackendFailure

# gum's exit status when the user aborts (Ctrl+C / Esc)
CANCEL_CODE = 130


@contextmanager
def scrubbed_environment(names: Sequence[str] = EXTERNAL_STYLE_VARS) -> Iterator[dict]:
    """Unset ``names`` for the duration of the block, then restore them.

    Yields the saved values (None for variables that were not set).
    """
    saved = {name: os.environ.get(name) for name in names}
    for name in names:
        os.environ.pop(name, None)
    try:
        yield saved
    finally:
        for name, value in saved.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value


class BackendProbe:
    """Cached answer to "is the helper installed and healthy?".

    The probe runs once; the answer is kept until ``invalidate()``.
    MAX_EXTERNAL_FAILURES consecutive call failures mark the helper
    unhealthy for the rest of the session.
    """

    def __init__(self, command: str = DEFAULT_EXTERNAL_COMMAND):
        self.command = command
        self.failures = 0
        self._healthy: Optional[bool] = None

    def available(self) -> bool:
        if self._healthy is None:
            self._healthy = self._check()
            debug_backend("probed external helper", command=self.command, healthy=self._healthy)
        return self._healthy

    def _check(self) -> bool:
        path = shutil.which(self.command)
        if path is None:
            return False
        try:
            proc = subprocess.run(
                [path, "--version"],
                capture_output=True,
                text=True,
                timeout=EXTERNAL_PROBE_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError):
            return False
        return proc.returncode == 0

    def invalidate(self) -> None:
        """Forget the cached answer; the next call probes again."""
        self._healthy = None
        self.failures = 0

    def record_success(self) -> None:
        self.failures = 0

    def record_failure(self) -> None:
        self.failures += 1
        if self.failures >= MAX_EXTERNAL_FAILURES:
            debug_backend("disabling external helper", failures=self.failures)
            self._healthy = False


_probes: dict[str, BackendProbe] = {}


def get_probe(command: str = DEFAULT_EXTERNAL_COMMAND) -> BackendProbe:
    """Process-wide probe for ``command``."""
    if command not in _probes:
        _probes[command] = BackendProbe(command)
    return _probes[command]


def _match_lines(items: Sequence[str], lines: list[str]) -> list[int]:
    """Map output lines back to item indices.

    Equal items are matched in order, so duplicates get distinct indices.
    """
    used: set[int] = set()
    indices = []
    for line in lines:
        for i, item in enumerate(items):
            if i not in used and item == line:
                used.add(i)
                indices.append(i)
                break
        else:
            raise ExternalBackendFailure(f"unexpected output line: {line!r}")
    return indices


class ExternalBackend:
    """Menus rendered by gum (choose / confirm / pager)."""

    name = "external"

    def __init__(self, command: str = DEFAULT_EXTERNAL_COMMAND):
        self.command = command

    def _run(
        self, args: list[str], input_text: Optional[str] = None, capture: bool = True
    ) -> subprocess.CompletedProcess:
        debug_backend("running external helper", command=self.command, action=args[0])
        with scrubbed_environment():
            try:
                return subprocess.run(
                    [self.command, *args],
                    input=input_text,
                    stdout=subprocess.PIPE if capture else None,
                    text=True,
                )
            except OSError as e:
                raise ExternalBackendFailure(f"cannot run {self.command}: {e}") from e

    def select(
        self,
        items: Sequence[str],
        title: str = "",
        cursor: int = 0,
        allow_quit: bool = True,
        allow_help: bool = False,
    ) -> MenuResult:
        options = list(items)
        if allow_quit:
            options.append(QUIT_OPTION)
        if allow_help:
            options.append(HELP_OPTION)

        args = ["choose"]
        if title:
            args.append(f"--header={title}")
        if 0 < cursor < len(items):
            args.append(f"--selected={items[cursor]}")
        proc = self._run(args + ["--", *options])

        if proc.returncode == CANCEL_CODE:
            return MenuResult.quit()
        if proc.returncode != 0:
            raise ExternalBackendFailure("choose failed", proc.returncode)

        line = (proc.stdout or "").rstrip("\n")
        if not line:
            raise ExternalBackendFailure("choose returned nothing", proc.returncode)
        if allow_quit and line == QUIT_OPTION:
            return MenuResult.quit()
        if allow_help and line == HELP_OPTION:
            return MenuResult.help()
        return MenuResult.selected(_match_lines(items, [line])[0])

    def multiselect(
        self,
        items: Sequence[str],
        title: str = "",
        selected: frozenset[int] = frozenset(),
        allow_select_all: bool = True,
        allow_select_none: bool = True,
    ) -> MenuResult:
        args = ["choose", "--no-limit"]
        if title:
            args.append(f"--header={title}")
        if selected:
            args.append("--selected=" + ",".join(items[i] for i in sorted(selected)))
        proc = self._run(args + ["--", *items])

        if proc.returncode == CANCEL_CODE:
            return MenuResult.quit()
        if proc.returncode != 0:
            raise ExternalBackendFailure("choose --no-limit failed", proc.returncode)

        # An empty selection is a valid answer here
        lines = [line for line in (proc.stdout or "").splitlines() if line]
        return MenuResult.chosen(_match_lines(items, lines))

    def confirm(
        self,
        message: str,
        warning: Optional[str] = None,
        default: bool = False,
        require_expert: bool = False,
    ) -> bool:
        text = message
        if warning:
            text += f"\n\n⚠ WARNING: {warning}"
        if require_expert:
            text += "\n\n⚠ EXPERT MODE REQUIRED: This operation can cause system instability!"

        proc = self._run(
            ["confirm", text, f"--default={'true' if default else 'false'}"],
            capture=False,
        )
        if proc.returncode == 0:
            return True
        if proc.returncode in (1, CANCEL_CODE):
            return False
        raise ExternalBackendFailure("confirm failed", proc.returncode)

    def pager(self, text: str, title: str = "Help") -> None:
        proc = self._run(
            ["pager", "--border=rounded"],
            input_text=f"{title}\n\n{text}",
            capture=False,
        )
        if proc.returncode not in (0, CANCEL_CODE):
            raise ExternalBackendFailure("pager failed", proc.returncode)
