from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.libs.result import Result, Return

from .dtos import CleanupJobsResponse


class CleanupJobsUseCase:
    """Run the retention sweep now instead of waiting for the next interval"""

    def __init__(self, orchestrator: ProvisioningOrchestrator):
        self.orchestrator = orchestrator

    async def execute(self) -> Result[CleanupJobsResponse]:
        removed = await self.orchestrator.sweep()
        remaining = len(await self.orchestrator.job_store.list_jobs())
        return Return.ok(CleanupJobsResponse(removed=removed, remaining=remaining))
