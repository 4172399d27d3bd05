"""Shared pytest fixtures."""

import io
import os
import tempfile
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import pytest
from rich.console import Console

from fub.core.keys import KeyDecoder
from fub.utils import debug


class ScriptedReader:
    """ByteReader that replays a fixed byte string.

    ``None`` entries in ``script`` stand for an expired timeout. Once the
    script is exhausted every read reports end of input.
    """

    def __init__(self, *script):
        self.script: list[Optional[bytes]] = []
        for chunk in script:
            if chunk is None:
                self.script.append(None)
            else:
                data = chunk.encode() if isinstance(chunk, str) else chunk
                self.script.extend(data[i : i + 1] for i in range(len(data)))
        self.timeouts: list[Optional[float]] = []

    def read(self, timeout: Optional[float]) -> Optional[bytes]:
        self.timeouts.append(timeout)
        if not self.script:
            return b""
        return self.script.pop(0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture(autouse=True)
def mock_fub_dir(temp_dir, monkeypatch):
    """Point FUB_DIR at a scratch directory and drop cached debug config."""
    fub_dir = temp_dir / ".fub"
    fub_dir.mkdir()
    for name in [k for k in os.environ if k.startswith("FUB_")]:
        monkeypatch.delenv(name)
    monkeypatch.setenv("FUB_DIR", str(fub_dir))
    debug.reload_config()
    yield fub_dir
    debug.reload_config()


@pytest.fixture
def decoder_for():
    """Build a KeyDecoder over a scripted byte sequence."""

    def make(*script) -> KeyDecoder:
        return KeyDecoder(ScriptedReader(*script))

    return make


@pytest.fixture
def fake_session():
    """Session factory that never touches the real terminal."""
    return lambda: nullcontext(None)


@pytest.fixture
def screen():
    """A console drawing into memory."""
    return Console(file=io.StringIO(), width=80, color_system=None)
