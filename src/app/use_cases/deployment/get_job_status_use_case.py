from src.app.provisioning.errors import JobNotFound
from src.app.repositories.job_store import IJobStore
from src.libs.result import Error, Result, Return

from .dtos import JobStatusResponse


class GetJobStatusUseCase:
    def __init__(self, job_store: IJobStore):
        self.job_store = job_store

    async def execute(self, job_id: str) -> Result[JobStatusResponse]:
        try:
            job = await self.job_store.get_job(job_id)
        except JobNotFound as exc:
            return Return.err(Error("JOB_NOT_FOUND", str(exc)))
        return Return.ok(JobStatusResponse.from_job(job))
