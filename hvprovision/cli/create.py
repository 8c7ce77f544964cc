"""Batch create, precondition check, and VM listing commands."""

from __future__ import annotations

import scriptconfig as scfg

from ..host import is_elevated
from ..preflight import ProvisionRequest, validate_preconditions
from ..provision import run_batch
from ._common import (
    _HostCommand,
    _confirm_block,
    _load_cfg,
    _make_client,
    _parse_names,
    log,
)


class _TargetCommand(_HostCommand):
    switch = scfg.Value('', help='Virtual switch the VM network adapter binds to.')
    destination = scfg.Value(
        '', help='Directory that receives one sub-directory per VM.'
    )


def _resolve_target(args, cfg) -> tuple[str, str]:
    destination = str(args.destination or cfg.defaults.destination).strip()
    switch = str(args.switch or cfg.defaults.switch).strip()
    if not destination:
        raise RuntimeError(
            '--destination is required (or set defaults.destination in config).'
        )
    if not switch:
        raise RuntimeError('--switch is required (or set defaults.switch in config).')
    return destination, switch


class CreateCLI(_TargetCommand):
    """Provision one or more VMs from the base disk image."""

    names = scfg.Value(
        [],
        position=1,
        nargs='+',
        help=(
            'VM name(s) to create, in order. A name whose disk already exists '
            'under the destination is skipped, so a name repeated in one '
            'batch is created once.'
        ),
    )
    power_on = scfg.Value(
        False, isflag=True, help='Start each VM after it is created.'
    )
    connect = scfg.Value(
        False, isflag=True, help='Open a console window for each created VM.'
    )
    dry_run = scfg.Value(
        False, isflag=True, help='Print actions without running.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        names = _parse_names(args.names)
        if not names:
            raise RuntimeError('At least one VM name is required.')
        destination, switch = _resolve_target(args, cfg)
        client = _make_client(cfg, args.host)
        request = ProvisionRequest(
            names=tuple(names),
            destination=destination,
            host=client.host,
            switch=switch,
            power_on=bool(args.power_on),
            connect=bool(args.connect),
        )
        if not args.dry_run:
            _confirm_block(
                yes=bool(args.yes),
                purpose=(
                    f'Create {len(names)} VM(s) on {client.host} under '
                    f'{destination}: {", ".join(names)}'
                ),
            )
        result = run_batch(
            request,
            cfg,
            client=client,
            is_privileged=is_elevated,
            dry_run=bool(args.dry_run),
        )
        print(f'Provisioning results (host={result.host}, switch={result.switch})')
        for line in result.summary_lines():
            print(line)
        if result.failed():
            log.warning(
                '{} of {} VM(s) failed', len(result.failed()), len(result.jobs)
            )
        return 0


class CheckCLI(_TargetCommand):
    """Run the batch preconditions without creating anything."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        destination, switch = _resolve_target(args, cfg)
        client = _make_client(cfg, args.host)
        request = ProvisionRequest(
            names=('(check)',),
            destination=destination,
            host=client.host,
            switch=switch,
        )
        ctx = validate_preconditions(request, client, is_privileged=is_elevated)
        print('✅ Preconditions satisfied.')
        print(f'  host: {ctx.host}')
        print(f'  switch: {ctx.switch}')
        print(f'  destination: {ctx.destination}')
        return 0


class ListCLI(_HostCommand):
    """List VMs registered on the Hyper-V host."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        client = _make_client(cfg, args.host)
        rows = client.list_vms()
        print(f'VMs on {client.host}')
        if not rows:
            print('  (none)')
        for row in sorted(rows, key=lambda r: str(r.get('Name', ''))):
            print(
                f'  - {row.get("Name", "?")} | state={row.get("State", "?")} '
                f'| path={row.get("Path", "")}'
            )
        return 0
