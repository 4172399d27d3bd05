"""Utilities for fub."""

from fub.utils.config import Config, get_fub_dir
from fub.utils.exceptions import EmptyItemList, FubError, TerminalUnavailable

__all__ = ["Config", "get_fub_dir", "EmptyItemList", "FubError", "TerminalUnavailable"]
