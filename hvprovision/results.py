"""Per-VM job records and the batch result returned by a provisioning run."""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .errors import JobError


class JobStatus(str, enum.Enum):
    PENDING = 'pending'
    NAME_RESOLVED = 'name_resolved'
    DIRECTORY_READY = 'directory_ready'
    DISK_CLONED = 'disk_cloned'
    REGISTERED = 'registered'
    VERIFIED = 'verified'
    UNVERIFIED = 'unverified'
    STARTED = 'started'
    CONNECTED = 'connected'
    SKIPPED = 'skipped'
    FAILED = 'failed'
    PLANNED = 'planned'


@dataclass
class VmJob:
    requested_name: str
    resolved_name: str = ''
    vm_dir: Path | None = None
    disk_path: Path | None = None
    status: JobStatus = JobStatus.PENDING
    failed_stage: str = ''
    error: str = ''

    @property
    def name(self) -> str:
        return self.resolved_name or self.requested_name

    def fail(self, ex: JobError) -> None:
        self.status = JobStatus.FAILED
        self.failed_stage = ex.stage
        self.error = str(ex)

    def outcome(self) -> str:
        if self.status is JobStatus.FAILED:
            return f'failed({self.failed_stage})'
        return self.status.value

    def as_dict(self) -> dict[str, str]:
        return {
            'requested_name': self.requested_name,
            'resolved_name': self.resolved_name,
            'vm_dir': str(self.vm_dir) if self.vm_dir else '',
            'disk_path': str(self.disk_path) if self.disk_path else '',
            'status': self.status.value,
            'failed_stage': self.failed_stage,
            'error': self.error,
        }


@dataclass
class BatchResult:
    host: str
    switch: str
    jobs: list[VmJob] = field(default_factory=list)
    dry_run: bool = False

    def counts(self) -> dict[str, int]:
        return dict(Counter(job.status.value for job in self.jobs))

    def failed(self) -> list[VmJob]:
        return [j for j in self.jobs if j.status is JobStatus.FAILED]

    def as_dict(self) -> dict:
        return {
            'host': self.host,
            'switch': self.switch,
            'dry_run': self.dry_run,
            'jobs': [job.as_dict() for job in self.jobs],
        }

    def summary_lines(self) -> list[str]:
        lines = []
        for job in self.jobs:
            line = f'  - {job.requested_name}'
            if job.resolved_name and job.resolved_name != job.requested_name:
                line += f' -> {job.resolved_name}'
            line += f' | {job.outcome()}'
            if job.error:
                line += f' | {job.error}'
            lines.append(line)
        return lines
