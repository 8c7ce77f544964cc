from __future__ import annotations

import sys
from pathlib import Path

import scriptconfig as scfg

from ..config import HVProvisionConfig, dump_toml, save, user_config_path
from ..util import ensure_dir
from ._common import _BaseCommand, _load_cfg_with_path


class InitCLI(_BaseCommand):
    """Write a config file populated with defaults."""

    user = scfg.Value(
        False,
        isflag=True,
        help='Write the per-user config instead of ./.hvprovision.toml.',
    )
    force = scfg.Value(
        False, isflag=True, help='Overwrite an existing config file.'
    )
    host = scfg.Value('', help='Default Hyper-V host.')
    switch = scfg.Value('', help='Default virtual switch.')
    destination = scfg.Value('', help='Default destination directory.')

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        if args.config:
            path = Path(args.config).expanduser().resolve()
        elif args.user:
            path = user_config_path()
        else:
            path = Path('.hvprovision.toml').resolve()
        if path.exists() and not args.force:
            print(f'Config already exists: {path}', file=sys.stderr)
            print('Use --force to overwrite it.', file=sys.stderr)
            return 2
        cfg = HVProvisionConfig()
        if args.host:
            cfg.defaults.host = str(args.host)
        if args.switch:
            cfg.defaults.switch = str(args.switch)
        if args.destination:
            cfg.defaults.destination = str(args.destination)
        ensure_dir(path.parent)
        save(path, cfg)
        print(f'Wrote config: {path}')
        return 0


class ShowCLI(_BaseCommand):
    """Print the effective config as TOML."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg, path = _load_cfg_with_path(args.config)
        print(f'# source: {path or "(built-in defaults)"}')
        print(dump_toml(cfg), end='')
        return 0


class ConfigModalCLI(scfg.ModalCLI):
    """Config file management."""

    init = InitCLI
    show = ShowCLI
