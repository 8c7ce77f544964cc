"""Batch-level precondition checks producing the validated host context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from loguru import logger

from .errors import (
    HostUnavailable,
    InvalidDestinationRoot,
    PermissionDenied,
    SwitchNotFound,
)
from .util import expand

log = logger


@dataclass(frozen=True)
class ProvisionRequest:
    names: tuple[str, ...]
    destination: str
    host: str
    switch: str
    power_on: bool = False
    connect: bool = False

    def __post_init__(self) -> None:
        names = tuple(str(n).strip() for n in self.names)
        if not names or any(not n for n in names):
            raise ValueError('At least one non-empty VM name is required.')
        object.__setattr__(self, 'names', names)


@dataclass(frozen=True)
class HostContext:
    host: str
    switch: str
    destination: Path
    destination_root: Path


def destination_root(destination: str | Path) -> Path | None:
    """Return the drive / anchor of an absolute destination, else None."""
    p = Path(expand(str(destination)))
    if not p.anchor:
        return None
    return Path(p.anchor)


def validate_preconditions(
    request: ProvisionRequest,
    client,
    *,
    is_privileged: Callable[[], bool],
) -> HostContext:
    """Run the ordered batch checks; raise on the first failure.

    ``client`` is a Hyper-V client already bound to ``request.host``.
    Only read-only queries are issued.
    """
    log.debug('Checking caller privilege')
    if not is_privileged():
        raise PermissionDenied(
            'Provisioning requires an elevated (Administrator) session.'
        )

    log.debug('Checking Hyper-V host {}', client.host)
    if not client.host_available():
        raise HostUnavailable(
            f'Hyper-V host {request.host!r} is not reachable or not a Hyper-V host.'
        )

    log.debug('Checking virtual switch {}', request.switch)
    if not client.switch_exists(request.switch):
        raise SwitchNotFound(
            f'Virtual switch {request.switch!r} not found on host {client.host!r}.'
        )

    root = destination_root(request.destination)
    if root is None:
        raise InvalidDestinationRoot(
            f'Destination {request.destination!r} is not an absolute path.'
        )
    if not root.exists():
        raise InvalidDestinationRoot(
            f'Destination root {str(root)!r} does not exist.'
        )

    ctx = HostContext(
        host=client.host,
        switch=request.switch,
        destination=Path(expand(request.destination)),
        destination_root=root,
    )
    log.info(
        'Preconditions ok: host={} switch={} destination={}',
        ctx.host,
        ctx.switch,
        ctx.destination,
    )
    return ctx
