"""Per-VM directory and disk preparation."""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from .errors import DirectoryVerificationFailed, DiskCloneFailed
from .preflight import HostContext
from .results import JobStatus, VmJob

log = logger

DISK_SUFFIX = '.vhdx'


def vm_paths(destination: Path, name: str) -> dict[str, Path]:
    vm_dir = Path(destination) / name
    return {
        'vm_dir': vm_dir,
        'disk': vm_dir / f'{name}{DISK_SUFFIX}',
    }


def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError as ex:
        raise DirectoryVerificationFailed(f'Cannot inspect {path}: {ex}') from ex


def prepare_storage(
    ctx: HostContext, job: VmJob, *, dry_run: bool = False
) -> VmJob:
    """Ensure the VM directory exists and decide whether the job is skipped.

    An existing disk image is taken as proof that the VM was already
    provisioned. A pre-existing directory on its own is not an error.
    """
    p = vm_paths(ctx.destination, job.resolved_name)
    job.vm_dir = p['vm_dir']
    job.disk_path = p['disk']

    if not _exists(job.vm_dir):
        if dry_run:
            log.info('DRYRUN: mkdir {}', job.vm_dir)
        else:
            log.debug('Creating VM directory {}', job.vm_dir)
            try:
                job.vm_dir.mkdir(parents=True, exist_ok=True)
            except OSError as ex:
                raise DirectoryVerificationFailed(
                    f'Could not create {job.vm_dir}: {ex}'
                ) from ex
            if not job.vm_dir.is_dir():
                raise DirectoryVerificationFailed(
                    f'Directory {job.vm_dir} is missing after creation.'
                )
    else:
        log.debug('VM directory exists: {}', job.vm_dir)

    if _exists(job.disk_path):
        log.warning(
            'Disk {} already exists; treating {!r} as provisioned',
            job.disk_path,
            job.resolved_name,
        )
        job.status = JobStatus.SKIPPED
        return job

    job.status = JobStatus.DIRECTORY_READY
    return job


def clone_disk(base_image: Path, disk_path: Path, *, dry_run: bool = False) -> Path:
    base_image = Path(base_image)
    if dry_run:
        log.info('DRYRUN: copy {} -> {}', base_image, disk_path)
        return disk_path
    if not base_image.is_file():
        raise DiskCloneFailed(f'Base image not found: {base_image}')
    log.info('Cloning {} -> {}', base_image, disk_path)
    try:
        shutil.copyfile(base_image, disk_path)
    except OSError as ex:
        raise DiskCloneFailed(
            f'Copying {base_image} to {disk_path} failed: {ex}'
        ) from ex
    return disk_path


def already_provisioned(ctx: HostContext, job: VmJob) -> bool:
    """Check the disk marker for the requested name before any host lookup.

    A re-run of the same batch then skips the name instead of deriving a
    fresh suffixed name for a VM it created earlier.
    """
    p = vm_paths(ctx.destination, job.requested_name)
    if not _exists(p['disk']):
        return False
    job.resolved_name = job.requested_name
    job.vm_dir = p['vm_dir']
    job.disk_path = p['disk']
    job.status = JobStatus.SKIPPED
    log.warning(
        'Disk {} already exists; treating {!r} as provisioned',
        p['disk'],
        job.requested_name,
    )
    return True
