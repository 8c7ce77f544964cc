"""Collision-free VM name selection."""

from __future__ import annotations

import itertools

from loguru import logger

log = logger


def resolve_name(client, requested: str) -> str:
    """Return ``requested`` if unused, else the first free ``requested + N``, N >= 2.

    This is a point-in-time lookup against the host, not a reservation.
    """
    if not client.vm_exists(requested):
        return requested
    log.warning('A VM named {!r} already exists on {}', requested, client.host)
    for suffix in itertools.count(2):
        candidate = f'{requested}{suffix}'
        if not client.vm_exists(candidate):
            log.warning('Using {!r} instead of {!r}', candidate, requested)
            return candidate
