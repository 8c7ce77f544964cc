"""Batch provisioning: validate once, then drive each VM through its stages."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .config import VM_GENERATION, HVProvisionConfig
from .console import launch_console
from .errors import JobError, RegistrationFailed, VerificationFailed
from .host import is_elevated
from .hyperv import HyperVClient
from .naming import resolve_name
from .preflight import HostContext, ProvisionRequest, validate_preconditions
from .results import BatchResult, JobStatus, VmJob
from .storage import already_provisioned, clone_disk, prepare_storage
from .util import CmdError

log = logger

ConsoleLauncher = Callable[[str, str], bool]


def provision_vm(
    ctx: HostContext,
    job: VmJob,
    cfg: HVProvisionConfig,
    client,
    *,
    power_on: bool = False,
    connect: bool = False,
    console: Optional[ConsoleLauncher] = None,
    dry_run: bool = False,
) -> VmJob:
    """Clone, register, verify, then optionally start and attach a console."""
    clone_disk(Path(cfg.image.base_vhdx), job.disk_path, dry_run=dry_run)
    if dry_run:
        log.info(
            'DRYRUN: New-VM {!r} on {} (switch={}, disk={})',
            job.resolved_name,
            ctx.host,
            ctx.switch,
            job.disk_path,
        )
        if power_on:
            log.info('DRYRUN: Start-VM {!r}', job.resolved_name)
        if connect:
            log.info('DRYRUN: attach console to {!r}', job.resolved_name)
        job.status = JobStatus.PLANNED
        return job
    job.status = JobStatus.DISK_CLONED

    try:
        client.new_vm(
            job.resolved_name,
            vhd_path=str(job.disk_path),
            switch=ctx.switch,
            path=str(job.vm_dir),
            generation=VM_GENERATION,
            memory_startup_bytes=cfg.vm.memory_startup_bytes,
        )
    except CmdError as ex:
        raise RegistrationFailed(
            f'New-VM failed for {job.resolved_name!r}: {ex.result.stderr.strip() or ex}'
        ) from ex
    job.status = JobStatus.REGISTERED

    if not client.vm_exists(job.resolved_name):
        warn = VerificationFailed(
            f'VM {job.resolved_name!r} was created but is not visible on {ctx.host}.'
        )
        log.warning('{}', warn)
        job.status = JobStatus.UNVERIFIED
        job.failed_stage = warn.stage
        job.error = str(warn)
        return job
    job.status = JobStatus.VERIFIED
    log.info('VM created: {}', job.resolved_name)

    if power_on:
        if client.start_vm(job.resolved_name):
            job.status = JobStatus.STARTED
            log.info('VM started: {}', job.resolved_name)
        else:
            log.warning('Start-VM did not succeed for {!r}', job.resolved_name)

    if connect:
        launcher = console or launch_console
        if launcher(ctx.host, job.resolved_name):
            job.status = JobStatus.CONNECTED
    return job


def process_job(
    ctx: HostContext,
    requested_name: str,
    cfg: HVProvisionConfig,
    client,
    *,
    power_on: bool = False,
    connect: bool = False,
    console: Optional[ConsoleLauncher] = None,
    dry_run: bool = False,
) -> VmJob:
    """Run one name through every stage; job-scoped errors end here."""
    job = VmJob(requested_name=requested_name)
    try:
        if already_provisioned(ctx, job):
            return job
        job.resolved_name = resolve_name(client, requested_name)
        job.status = JobStatus.NAME_RESOLVED
        prepare_storage(ctx, job, dry_run=dry_run)
        if job.status is JobStatus.SKIPPED:
            return job
        provision_vm(
            ctx,
            job,
            cfg,
            client,
            power_on=power_on,
            connect=connect,
            console=console,
            dry_run=dry_run,
        )
    except JobError as ex:
        job.fail(ex)
        log.warning(
            'Provisioning {!r} failed at stage {}: {}', job.name, ex.stage, ex
        )
    return job


def run_batch(
    request: ProvisionRequest,
    cfg: HVProvisionConfig,
    *,
    client=None,
    is_privileged: Optional[Callable[[], bool]] = None,
    console: Optional[ConsoleLauncher] = None,
    dry_run: bool = False,
) -> BatchResult:
    """Provision every requested name in order.

    Precondition failures propagate before any job starts. After that the
    batch always completes and reports one outcome per requested name.
    """
    if client is None:
        client = HyperVClient(request.host, powershell=cfg.hyperv.powershell)
    if is_privileged is None:
        is_privileged = is_elevated
    if console is None:
        console = functools.partial(
            launch_console, client=cfg.hyperv.console_client
        )

    ctx = validate_preconditions(request, client, is_privileged=is_privileged)
    result = BatchResult(host=ctx.host, switch=ctx.switch, dry_run=dry_run)
    total = len(request.names)
    for idx, name in enumerate(request.names, start=1):
        log.info('[{}/{}] Provisioning {!r}', idx, total, name)
        job = process_job(
            ctx,
            name,
            cfg,
            client,
            power_on=request.power_on,
            connect=request.connect,
            console=console,
            dry_run=dry_run,
        )
        log.debug('Job {!r} finished: {}', job.name, job.outcome())
        result.jobs.append(job)
    return result
