"""
ProvisioningJob

Volatile record of one tenant-creation workflow run. Not a table: jobs live
in a job store and are swept after a retention window.
"""

from datetime import UTC, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .enums import JobKind, JobStatus

TERMINAL_STATUSES = frozenset({JobStatus.completed, JobStatus.failed})

# Legal status transitions; terminal states absorb.
ALLOWED_TRANSITIONS = {
    JobStatus.initializing: frozenset({JobStatus.running, JobStatus.failed}),
    JobStatus.running: frozenset({JobStatus.running, JobStatus.completed, JobStatus.failed}),
    JobStatus.completed: frozenset(),
    JobStatus.failed: frozenset(),
}


def new_job_id() -> str:
    return f"job_{uuid4().hex}"


def _now() -> datetime:
    return datetime.now(UTC)


class JobStep(BaseModel):
    """One entry of a job's step log"""

    message: str
    timestamp: datetime = Field(default_factory=_now)


class ProvisioningJob(BaseModel):
    """
    ProvisioningJob - tracked unit of work for one provisioning run.

    Business Rules:
    - progress is 0-100 and never decreases
    - progress reaches 100 only together with status `completed`
    - status moves initializing -> running -> completed|failed
    - a failed job keeps the progress it had when the failing step began
    """

    job_id: str = Field(default_factory=new_job_id)
    kind: JobKind = JobKind.provision
    status: JobStatus = JobStatus.initializing
    progress: int = 0

    steps: List[JobStep] = Field(default_factory=list)
    error: Optional[str] = None
    failure_reason: Optional[str] = None
    failed_step: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)

    # Results recorded as steps succeed
    tenant_id: Optional[UUID] = None
    app_path: Optional[str] = None
    deployment_url: Optional[str] = None
    api_key: Optional[str] = None

    request: Dict[str, Any] = Field(default_factory=dict)

    started_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
