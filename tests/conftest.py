"""Shared fakes for the Hyper-V client and the console launcher."""

from __future__ import annotations

from pathlib import Path

import pytest

from hvprovision.config import HVProvisionConfig
from hvprovision.util import CmdError, CmdResult


class FakeHyperV:
    """In-memory stand-in for :class:`hvprovision.hyperv.HyperVClient`."""

    def __init__(
        self,
        host: str = 'localhost',
        *,
        vms=(),
        switches=('External',),
        available: bool = True,
    ) -> None:
        self.host = host
        self.vms: dict[str, dict] = {name: {'Name': name} for name in vms}
        self.switches = set(switches)
        self.available = available
        self.calls: list[tuple] = []
        self.fail_new_vm: set[str] = set()
        self.hide_after_create: set[str] = set()
        self.fail_start: set[str] = set()

    def host_available(self) -> bool:
        self.calls.append(('host_available',))
        return self.available

    def switch_exists(self, name: str) -> bool:
        self.calls.append(('switch_exists', name))
        return name in self.switches

    def vm_exists(self, name: str) -> bool:
        self.calls.append(('vm_exists', name))
        return name in self.vms

    def new_vm(self, name, *, vhd_path, switch, path, generation, memory_startup_bytes):
        self.calls.append(('new_vm', name))
        if name in self.fail_new_vm:
            raise CmdError(['New-VM'], CmdResult(1, '', 'New-VM : boom'))
        if name not in self.hide_after_create:
            self.vms[name] = {
                'Name': name,
                'VHDPath': vhd_path,
                'SwitchName': switch,
                'Path': path,
                'Generation': generation,
                'MemoryStartupBytes': memory_startup_bytes,
            }

    def start_vm(self, name: str) -> bool:
        self.calls.append(('start_vm', name))
        return name not in self.fail_start

    def mutations(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in {'new_vm', 'start_vm'}]


class RecordingConsole:
    def __init__(self) -> None:
        self.launched: list[tuple[str, str]] = []

    def __call__(self, host: str, vm_name: str) -> bool:
        self.launched.append((host, vm_name))
        return True


@pytest.fixture
def make_hv():
    """Factory for :class:`FakeHyperV` with per-test inventory."""
    return FakeHyperV


@pytest.fixture
def console() -> RecordingConsole:
    return RecordingConsole()


@pytest.fixture
def base_image(tmp_path: Path) -> Path:
    img = tmp_path / 'template' / 'base.vhdx'
    img.parent.mkdir()
    img.write_bytes(b'VHDX-TEMPLATE')
    return img


@pytest.fixture
def cfg(base_image: Path) -> HVProvisionConfig:
    cfg = HVProvisionConfig()
    cfg.image.base_vhdx = str(base_image)
    return cfg
