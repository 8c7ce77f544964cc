from __future__ import annotations

import sys
from pathlib import Path

import scriptconfig as scfg
from loguru import logger

from ..config import HVProvisionConfig, find_config, load
from ..hyperv import HyperVClient

log = logger


class _BaseCommand(scfg.DataConfig):
    """Base options shared by all commands."""

    config = scfg.Value(
        None,
        help='Path to config TOML (default: .hvprovision.toml, then the user config).',
    )
    verbose = scfg.Value(
        0,
        short_alias=['v'],
        isflag='counter',
        help='Increase verbosity (-v, -vv).',
    )
    yes = scfg.Value(
        False,
        isflag=True,
        help='Do not ask for confirmation before changing the host.',
    )


class _HostCommand(_BaseCommand):
    """Options for commands that talk to a Hyper-V host."""

    host = scfg.Value(
        '',
        help='Hyper-V host (localhost, ".", or the local name mean this machine).',
    )


def _cfg_path(p: str | None) -> Path | None:
    return find_config(p)


def _load_cfg(config_path: str | None) -> HVProvisionConfig:
    cfg, _ = _load_cfg_with_path(config_path)
    return cfg


def _load_cfg_with_path(
    config_path: str | None,
) -> tuple[HVProvisionConfig, Path | None]:
    path = _cfg_path(config_path)
    if path is None:
        log.debug('No config file found; using built-in defaults')
        return HVProvisionConfig().expanded_paths(), None
    if not path.exists():
        raise FileNotFoundError(
            f'Config not found: {path}. Run: hvprovision config init --config {path}'
        )
    log.debug('Loading config {}', path)
    return load(path).expanded_paths(), path


def _make_client(cfg: HVProvisionConfig, host: str) -> HyperVClient:
    return HyperVClient(
        host or cfg.defaults.host, powershell=cfg.hyperv.powershell
    )


def _parse_names(value) -> list[str]:
    if value is None:
        return []
    # List items are kept verbatim; names may contain commas.
    if isinstance(value, str):
        items = value.split(',')
    else:
        items = [str(item) for item in value]
    return [s.strip() for s in items if s.strip()]


def _confirm_block(*, yes: bool, purpose: str) -> None:
    if yes:
        return
    if not sys.stdin.isatty():
        raise RuntimeError(
            'Host changes require confirmation, but stdin is not interactive. '
            'Re-run with --yes.'
        )
    print('About to change the Hyper-V host:')
    print(f'  {purpose}')
    ans = input('Continue? [y/N]: ').strip().lower()
    if ans not in {'y', 'yes'}:
        raise RuntimeError('Aborted by user.')
