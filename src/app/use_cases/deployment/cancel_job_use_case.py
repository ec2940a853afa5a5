from src.app.provisioning.errors import JobNotFound
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.libs.result import Error, Result, Return

from .dtos import CancelJobResponse


class CancelJobUseCase:
    """
    Cancel a running job.

    Business Logic:
    1. Job must exist (JOB_NOT_FOUND)
    2. Job must not be finished (JOB_ALREADY_FINISHED)
    3. Cancel the pipeline task and wait until the job records CANCELLED

    Steps already applied stay applied.
    """

    def __init__(self, orchestrator: ProvisioningOrchestrator):
        self.orchestrator = orchestrator

    async def execute(self, job_id: str) -> Result[CancelJobResponse]:
        job_store = self.orchestrator.job_store
        try:
            job = await job_store.get_job(job_id)
        except JobNotFound as exc:
            return Return.err(Error("JOB_NOT_FOUND", str(exc)))

        if job.is_terminal:
            return Return.err(
                Error("JOB_ALREADY_FINISHED", f"Job '{job_id}' is already {job.status.value}")
            )

        if not await self.orchestrator.cancel(job_id):
            return Return.err(Error("JOB_NOT_RUNNING", f"Job '{job_id}' has no running task"))

        job = await job_store.get_job(job_id)
        return Return.ok(
            CancelJobResponse(
                job_id=job.job_id,
                status=job.status,
                failure_reason=job.failure_reason,
                progress=job.progress,
            )
        )
