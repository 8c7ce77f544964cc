"""Runtime helpers for constructing PowerShell command arguments."""

from __future__ import annotations

import platform

LOCAL_HOST_ALIASES = ('localhost', '.', '127.0.0.1', '::1')


def local_computer_name() -> str:
    return platform.node()


def is_local_host(host: str) -> bool:
    name = (host or '').strip().lower()
    if not name or name in LOCAL_HOST_ALIASES:
        return True
    return name == local_computer_name().lower()


def normalize_host(host: str) -> str:
    """Map the local-host aliases onto ``localhost``; keep remote names as given."""
    if is_local_host(host):
        return 'localhost'
    return host.strip()


def ps_quote(value: str) -> str:
    # PowerShell single-quoted literal: the only escape is a doubled quote.
    return "'" + str(value).replace("'", "''") + "'"


def computer_name_args(host: str) -> str:
    if is_local_host(host):
        return ''
    return f' -ComputerName {ps_quote(host)}'


def powershell_cmd(script: str, *, exe: str = 'powershell') -> list[str]:
    return [exe, '-NoProfile', '-NonInteractive', '-Command', script]
