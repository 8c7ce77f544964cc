"""Console attach: launch the Hyper-V remote display client and return."""

from __future__ import annotations

from loguru import logger

from .util import spawn_detached, which

log = logger


def console_cmd(host: str, vm_name: str, *, client: str = 'vmconnect.exe') -> list[str]:
    return [client, host, vm_name]


def launch_console(
    host: str, vm_name: str, *, client: str = 'vmconnect.exe'
) -> bool:
    """Start the console client without waiting for it.

    Returns False when the client is not installed; nothing is observed about
    the session once the process has been spawned.
    """
    if which(client) is None:
        log.warning('Console client {} not found; not attaching to {}', client, vm_name)
        return False
    pid = spawn_detached(console_cmd(host, vm_name, client=client))
    log.info('Console client started for {} (pid={})', vm_name, pid)
    return True
