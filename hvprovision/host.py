"""Host prerequisite checks: required commands and caller elevation."""

from __future__ import annotations

import os
import sys

from loguru import logger

from .util import which

log = logger


def check_commands(
    *, powershell: str = 'powershell', console_client: str = 'vmconnect.exe'
) -> tuple[list[str], list[str]]:
    missing = [c for c in (powershell,) if which(c) is None]
    missing_opt = [c for c in (console_client,) if which(c) is None]
    return missing, missing_opt


def host_is_windows() -> bool:
    return sys.platform == 'win32'


def is_elevated() -> bool:
    """True when the current process runs as Administrator (or root)."""
    if host_is_windows():
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError) as ex:
            log.warning('Could not determine elevation status: {}', ex)
            return False
    return os.geteuid() == 0
