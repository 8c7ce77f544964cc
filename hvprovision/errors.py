"""Project-specific exception types.

Batch-fatal failures derive from :class:`PreconditionError` and abort the run
before any VM is touched. Job-scoped failures derive from :class:`JobError`
and are caught at the per-VM boundary.
"""

from __future__ import annotations


class HVProvisionError(RuntimeError):
    """Base error for domain-level hvprovision failures."""


class PreconditionError(HVProvisionError):
    """Raised by the batch-level validation stage."""


class PermissionDenied(PreconditionError):
    """Raised when the caller does not hold administrative privilege."""


class HostUnavailable(PreconditionError):
    """Raised when the Hyper-V host cannot be reached or is not recognized."""


class SwitchNotFound(PreconditionError):
    """Raised when the requested virtual switch does not exist on the host."""


class InvalidDestinationRoot(PreconditionError):
    """Raised when the destination path has no root, or its root is missing."""


class JobError(HVProvisionError):
    """Base error for failures scoped to a single VM job."""

    stage = 'job'


class DirectoryVerificationFailed(JobError):
    stage = 'directory'


class DiskCloneFailed(JobError):
    stage = 'clone'


class RegistrationFailed(JobError):
    stage = 'register'


class VerificationFailed(JobError):
    """Recorded (not raised) when a created VM cannot be found afterwards."""

    stage = 'verify'
