from typing import Optional

from src.app.repositories.job_store import IJobStore
from src.domain.entities import JobStatus
from src.libs.result import Result, Return

from .dtos import JobListResponse, JobSummary


class ListJobsUseCase:
    """All retained jobs, oldest first, optionally filtered by status"""

    def __init__(self, job_store: IJobStore):
        self.job_store = job_store

    async def execute(self, status: Optional[JobStatus] = None) -> Result[JobListResponse]:
        jobs = await self.job_store.list_jobs()
        if status is not None:
            jobs = [job for job in jobs if job.status == status]
        return Return.ok(
            JobListResponse(jobs=[JobSummary.from_job(job) for job in jobs], total=len(jobs))
        )
