from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Optional

from src.domain.entities import JobKind, JobStatus, ProvisioningJob


class IJobStore(ABC):
    """
    Provisioning job store interface - application layer

    Exactly one pipeline run writes a given job; any number of callers may
    read it concurrently. Implementations must hand readers snapshots that
    later writes do not mutate.
    """

    @abstractmethod
    async def create_job(
        self, request: Dict[str, Any], kind: JobKind = JobKind.provision
    ) -> str:
        """Register a new job in `initializing` state and return its id"""
        pass

    @abstractmethod
    async def append_step(self, job_id: str, message: str) -> None:
        """Append a timestamped entry to the job's step log"""
        pass

    @abstractmethod
    async def set_progress(self, job_id: str, percent: int) -> None:
        """Advance progress; raises InvalidJobTransition if it would decrease"""
        pass

    @abstractmethod
    async def set_status(
        self,
        job_id: str,
        status: JobStatus,
        error: Optional[str] = None,
        reason: Optional[str] = None,
        progress: Optional[int] = None,
        failed_step: Optional[str] = None,
    ) -> None:
        """Move the job along its state machine"""
        pass

    @abstractmethod
    async def update_job(self, job_id: str, **fields: Any) -> None:
        """Record step results (tenant_id, app_path, deployment_url, api_key)"""
        pass

    @abstractmethod
    async def add_warning(self, job_id: str, message: str) -> None:
        """Record a non-fatal problem on the job"""
        pass

    @abstractmethod
    async def get_job(self, job_id: str) -> ProvisioningJob:
        """Snapshot of a job; raises JobNotFound"""
        pass

    @abstractmethod
    async def list_jobs(self) -> List[ProvisioningJob]:
        """Snapshots of all jobs, oldest first"""
        pass

    @abstractmethod
    async def sweep(self, retention: timedelta) -> int:
        """Drop terminal jobs older than retention. Returns count removed."""
        pass
