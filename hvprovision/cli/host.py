from __future__ import annotations

import scriptconfig as scfg

from ..host import check_commands, is_elevated
from ._common import _BaseCommand, _HostCommand, _load_cfg, _make_client


class DoctorCLI(_BaseCommand):
    """Check host prerequisites and elevation."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        missing, missing_opt = check_commands(
            powershell=cfg.hyperv.powershell,
            console_client=cfg.hyperv.console_client,
        )
        rc = 0
        if missing:
            print('❌ Missing required commands:', ', '.join(missing))
            rc = 2
        if missing_opt:
            print('➖ Missing optional commands:', ', '.join(missing_opt))
        if is_elevated():
            print('✅ Running elevated.')
        else:
            print('❌ Not elevated; run from an Administrator session.')
            rc = 2
        if rc == 0:
            print('✅ Required host commands are present.')
        return rc


class SwitchesCLI(_HostCommand):
    """List virtual switches on the Hyper-V host."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        client = _make_client(cfg, args.host)
        rows = client.list_switches()
        print(f'Virtual switches on {client.host}')
        if not rows:
            print('  (none)')
        for row in sorted(rows, key=lambda r: str(r.get('Name', ''))):
            print(f'  - {row.get("Name", "?")} | type={row.get("SwitchType", "?")}')
        return 0


class HostModalCLI(scfg.ModalCLI):
    """Host-level checks and queries."""

    doctor = DoctorCLI
    switches = SwitchesCLI
