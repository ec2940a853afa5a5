import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, List, Optional

from src.app.provisioning.errors import InvalidJobTransition, JobNotFound
from src.app.repositories.job_store import IJobStore
from src.domain.entities import JobKind, JobStatus, JobStep, ProvisioningJob
from src.domain.entities.provisioning_job import ALLOWED_TRANSITIONS, TERMINAL_STATUSES

logger = logging.getLogger(__name__)

RESULT_FIELDS = frozenset({"tenant_id", "app_path", "deployment_url", "api_key"})


class InMemoryJobStore(IJobStore):
    """
    Process-local job store.

    Jobs are lost on restart. All writes go through one asyncio.Lock and
    every read returns a deep copy, so a poller never sees a half-applied
    update or a snapshot that changes under it.
    """

    def __init__(self):
        self._jobs: Dict[str, ProvisioningJob] = {}
        self._lock = asyncio.Lock()

    async def create_job(
        self, request: Dict[str, Any], kind: JobKind = JobKind.provision
    ) -> str:
        job = ProvisioningJob(kind=kind, request=dict(request))
        async with self._lock:
            self._jobs[job.job_id] = job
        logger.debug(f"[{job.job_id}] Job created ({kind.value})")
        return job.job_id

    async def append_step(self, job_id: str, message: str) -> None:
        async with self._lock:
            job = self._get(job_id)
            self._check_writable(job)
            now = _now()
            job.steps.append(JobStep(message=message, timestamp=now))
            job.updated_at = now

    async def set_progress(self, job_id: str, percent: int) -> None:
        async with self._lock:
            job = self._get(job_id)
            self._check_writable(job)
            self._check_progress(job, percent, job.status)
            job.progress = percent
            job.updated_at = _now()

    async def set_status(
        self,
        job_id: str,
        status: JobStatus,
        error: Optional[str] = None,
        reason: Optional[str] = None,
        progress: Optional[int] = None,
        failed_step: Optional[str] = None,
    ) -> None:
        async with self._lock:
            job = self._get(job_id)
            if status not in ALLOWED_TRANSITIONS[job.status]:
                raise InvalidJobTransition(
                    f"Job {job_id} cannot move from {job.status.value} to {status.value}"
                )
            if progress is not None:
                self._check_progress(job, progress, status)
            elif status == JobStatus.completed and job.progress != 100:
                raise InvalidJobTransition(f"Job {job_id} cannot complete at {job.progress}%")

            now = _now()
            job.status = status
            if progress is not None:
                job.progress = progress
            if error is not None:
                job.error = error
            if reason is not None:
                job.failure_reason = reason
            if failed_step is not None:
                job.failed_step = failed_step
            if status in TERMINAL_STATUSES:
                job.finished_at = now
            job.updated_at = now

    async def update_job(self, job_id: str, **fields: Any) -> None:
        unknown = set(fields) - RESULT_FIELDS
        if unknown:
            raise ValueError(f"Cannot update job fields: {', '.join(sorted(unknown))}")
        async with self._lock:
            job = self._get(job_id)
            self._check_writable(job)
            for name, value in fields.items():
                setattr(job, name, value)
            job.updated_at = _now()

    async def add_warning(self, job_id: str, message: str) -> None:
        async with self._lock:
            job = self._get(job_id)
            job.warnings.append(message)
            job.updated_at = _now()

    async def get_job(self, job_id: str) -> ProvisioningJob:
        async with self._lock:
            return self._get(job_id).model_copy(deep=True)

    async def list_jobs(self) -> List[ProvisioningJob]:
        async with self._lock:
            jobs = [job.model_copy(deep=True) for job in self._jobs.values()]
        return sorted(jobs, key=lambda job: job.started_at)

    async def sweep(self, retention: timedelta) -> int:
        threshold = _now() - retention
        async with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.is_terminal and job.started_at < threshold
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)

    def _get(self, job_id: str) -> ProvisioningJob:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return job

    @staticmethod
    def _check_writable(job: ProvisioningJob) -> None:
        if job.is_terminal:
            raise InvalidJobTransition(f"Job {job.job_id} is already {job.status.value}")

    @staticmethod
    def _check_progress(job: ProvisioningJob, percent: int, status: JobStatus) -> None:
        if not 0 <= percent <= 100:
            raise InvalidJobTransition(f"Progress {percent} is outside 0-100")
        if percent < job.progress:
            raise InvalidJobTransition(
                f"Progress of job {job.job_id} cannot go back from {job.progress} to {percent}"
            )
        if percent == 100 and status != JobStatus.completed:
            raise InvalidJobTransition("Progress reaches 100 only when the job completes")


def _now() -> datetime:
    return datetime.now(UTC)
