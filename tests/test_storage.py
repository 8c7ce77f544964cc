"""Tests for per-VM directory preparation and disk cloning."""

from __future__ import annotations

from pathlib import Path

import pytest

from hvprovision.errors import DirectoryVerificationFailed, DiskCloneFailed
from hvprovision.preflight import HostContext
from hvprovision.results import JobStatus, VmJob
from hvprovision.storage import (
    already_provisioned,
    clone_disk,
    prepare_storage,
    vm_paths,
)


def _ctx(dest: Path) -> HostContext:
    return HostContext(
        host='localhost',
        switch='External',
        destination=dest,
        destination_root=Path(dest.anchor),
    )


def _job(name: str) -> VmJob:
    return VmJob(requested_name=name, resolved_name=name)


def test_vm_paths_joins_without_manual_separators(tmp_path: Path) -> None:
    p = vm_paths(tmp_path, 'Server 3')
    assert p['vm_dir'] == tmp_path / 'Server 3'
    assert p['disk'] == tmp_path / 'Server 3' / 'Server 3.vhdx'


def test_creates_missing_directory(tmp_path: Path) -> None:
    job = prepare_storage(_ctx(tmp_path / 'vms'), _job('a'))
    assert job.status is JobStatus.DIRECTORY_READY
    assert (tmp_path / 'vms' / 'a').is_dir()
    assert job.disk_path == tmp_path / 'vms' / 'a' / 'a.vhdx'


def test_existing_directory_without_disk_proceeds(tmp_path: Path) -> None:
    (tmp_path / 'a').mkdir()
    (tmp_path / 'a' / 'notes.txt').write_text('x')
    job = prepare_storage(_ctx(tmp_path), _job('a'))
    assert job.status is JobStatus.DIRECTORY_READY


def test_existing_disk_skips(tmp_path: Path) -> None:
    (tmp_path / 'a').mkdir()
    (tmp_path / 'a' / 'a.vhdx').write_bytes(b'')
    job = prepare_storage(_ctx(tmp_path), _job('a'))
    assert job.status is JobStatus.SKIPPED


def test_directory_not_present_after_mkdir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(Path, 'mkdir', lambda self, *a, **k: None)
    with pytest.raises(DirectoryVerificationFailed):
        prepare_storage(_ctx(tmp_path), _job('ghost'))


def test_mkdir_error_is_job_scoped(monkeypatch, tmp_path: Path) -> None:
    def boom(self, *a, **k):
        raise PermissionError('denied')

    monkeypatch.setattr(Path, 'mkdir', boom)
    with pytest.raises(DirectoryVerificationFailed, match='denied'):
        prepare_storage(_ctx(tmp_path), _job('locked'))


def test_dry_run_does_not_create_directory(tmp_path: Path) -> None:
    job = prepare_storage(_ctx(tmp_path), _job('a'), dry_run=True)
    assert job.status is JobStatus.DIRECTORY_READY
    assert not (tmp_path / 'a').exists()


def test_clone_disk_copies_bytes(tmp_path: Path, base_image: Path) -> None:
    dst = tmp_path / 'out.vhdx'
    clone_disk(base_image, dst)
    assert dst.read_bytes() == base_image.read_bytes()


def test_clone_disk_missing_source(tmp_path: Path) -> None:
    with pytest.raises(DiskCloneFailed, match='not found'):
        clone_disk(tmp_path / 'missing.vhdx', tmp_path / 'out.vhdx')


def test_clone_disk_copy_error(tmp_path: Path, base_image: Path) -> None:
    with pytest.raises(DiskCloneFailed):
        clone_disk(base_image, tmp_path / 'no-such-dir' / 'out.vhdx')


def test_unreadable_disk_marker_is_job_scoped(monkeypatch, tmp_path: Path) -> None:
    orig = Path.exists

    def exists(self, *a, **k):
        if 'locked' in self.name:
            raise PermissionError('access denied')
        return orig(self, *a, **k)

    monkeypatch.setattr(Path, 'exists', exists)
    with pytest.raises(DirectoryVerificationFailed, match='access denied'):
        already_provisioned(_ctx(tmp_path), VmJob(requested_name='locked'))
    assert already_provisioned(_ctx(tmp_path), VmJob(requested_name='open')) is False
