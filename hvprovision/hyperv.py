"""Thin Hyper-V client that drives the Hyper-V PowerShell module.

Every query maps onto one cmdlet invocation. Existence checks are modelled on
exit codes (``-ErrorAction Stop`` turns "not found" into a non-zero exit), so
the client never has to parse localized error text.
"""

from __future__ import annotations

import json

from loguru import logger

from .runtime import computer_name_args, normalize_host, powershell_cmd, ps_quote
from .util import CmdError, CmdResult, run_cmd, which

log = logger


def _parse_json_rows(text: str) -> list[dict]:
    text = (text or '').strip()
    if not text:
        return []
    data = json.loads(text)
    # ConvertTo-Json emits a bare object when the pipeline holds one item.
    if isinstance(data, dict):
        return [data]
    return [row for row in data if isinstance(row, dict)]


class HyperVClient:
    """Hyper-V management calls bound to a single host."""

    def __init__(self, host: str, *, powershell: str = 'powershell') -> None:
        self.host = normalize_host(host)
        self.powershell = powershell

    def __repr__(self) -> str:
        return f'HyperVClient(host={self.host!r})'

    def _run(self, script: str, *, check: bool = False) -> CmdResult:
        return run_cmd(
            powershell_cmd(script, exe=self.powershell),
            check=check,
            capture=True,
        )

    def _target(self) -> str:
        return computer_name_args(self.host)

    def host_available(self) -> bool:
        if which(self.powershell) is None:
            log.error('PowerShell executable not found: {}', self.powershell)
            return False
        res = self._run(f'Get-VMHost{self._target()} -ErrorAction Stop | Out-Null')
        if res.code != 0:
            log.debug('Get-VMHost failed for {}: {}', self.host, res.stderr.strip())
        return res.code == 0

    def switch_exists(self, name: str) -> bool:
        res = self._run(
            f'Get-VMSwitch -Name {ps_quote(name)}{self._target()} '
            '-ErrorAction Stop | Out-Null'
        )
        return res.code == 0

    def vm_exists(self, name: str) -> bool:
        res = self._run(
            f'Get-VM -Name {ps_quote(name)}{self._target()} '
            '-ErrorAction Stop | Out-Null'
        )
        return res.code == 0

    def list_vms(self) -> list[dict]:
        res = self._run(
            f'Get-VM{self._target()} | '
            "Select-Object Name,@{n='State';e={$_.State.ToString()}},Path | "
            'ConvertTo-Json -Compress',
            check=True,
        )
        return _parse_json_rows(res.stdout)

    def list_switches(self) -> list[dict]:
        res = self._run(
            f'Get-VMSwitch{self._target()} | '
            "Select-Object Name,@{n='SwitchType';e={$_.SwitchType.ToString()}} | "
            'ConvertTo-Json -Compress',
            check=True,
        )
        return _parse_json_rows(res.stdout)

    def new_vm(
        self,
        name: str,
        *,
        vhd_path: str,
        switch: str,
        path: str,
        generation: int,
        memory_startup_bytes: int,
    ) -> None:
        """Register a VM bound to an existing disk. Raises CmdError on failure."""
        script = (
            f'New-VM -Name {ps_quote(name)}{self._target()} '
            f'-Generation {int(generation)} '
            f'-MemoryStartupBytes {int(memory_startup_bytes)} '
            f'-VHDPath {ps_quote(vhd_path)} '
            f'-SwitchName {ps_quote(switch)} '
            f'-Path {ps_quote(path)} '
            '-ErrorAction Stop | Out-Null'
        )
        self._run(script, check=True)

    def start_vm(self, name: str) -> bool:
        try:
            self._run(
                f'Start-VM -Name {ps_quote(name)}{self._target()} -ErrorAction Stop',
                check=True,
            )
        except CmdError as ex:
            log.debug('Start-VM failed for {}: {}', name, ex)
            return False
        return True
