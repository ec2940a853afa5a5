"""
Provisioning orchestrator.

Creates the job synchronously, then runs its pipeline in a background task
that the orchestrator retains until it finishes, so a job can be cancelled
or awaited by id. Also owns the periodic retention sweep of the job store.
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Dict, Optional
from uuid import UUID

from src.app.provisioning.context import StepContext
from src.app.provisioning.errors import SubdomainInFlight
from src.app.provisioning.pipeline import (
    CANCELLED_REASON,
    ProvisioningPipeline,
)
from src.app.provisioning.settings import ProvisioningSettings
from src.app.provisioning.steps import ProvisioningSteps
from src.app.repositories.job_store import IJobStore
from src.domain.entities import JobKind, JobStatus, ProvisioningJob, TenantConfig

logger = logging.getLogger(__name__)


@dataclass
class SubmittedJob:
    job_id: str
    task: "asyncio.Task[ProvisioningJob]"


class ProvisioningOrchestrator:
    def __init__(
        self,
        job_store: IJobStore,
        steps: ProvisioningSteps,
        settings: ProvisioningSettings,
    ):
        self.job_store = job_store
        self.settings = settings
        self.provision_pipeline = ProvisioningPipeline(
            job_store, steps.provisioning(), settings.step_timeout
        )
        self.redeploy_pipeline = ProvisioningPipeline(
            job_store, steps.redeploy(), settings.step_timeout
        )
        self.resume_pipeline = ProvisioningPipeline(
            job_store, steps.resume(), settings.step_timeout
        )
        self._tasks: Dict[str, asyncio.Task] = {}
        # subdomain -> job id of the run currently holding it
        self._in_flight: Dict[str, Optional[str]] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def is_subdomain_in_flight(self, subdomain: str) -> bool:
        return subdomain in self._in_flight

    def active_jobs(self) -> Dict[str, str]:
        """Job ids of running pipelines keyed by subdomain"""
        return {sub: job_id for sub, job_id in self._in_flight.items() if job_id}

    async def submit(self, config: TenantConfig) -> SubmittedJob:
        """Create a provisioning job and start its pipeline in the background"""
        template_name = config.template_name or self.settings.default_template
        request = config.model_dump()
        request["template_name"] = template_name
        ctx = StepContext(config=config, template_name=template_name)
        return await self._submit(
            self.provision_pipeline, JobKind.provision, request, ctx
        )

    async def submit_redeploy(
        self, tenant_id: UUID, config: TenantConfig, resume: bool = False
    ) -> SubmittedJob:
        """
        Rebuild and redeploy an existing tenant's application.

        With `resume`, runs the remaining provisioning steps instead (seed,
        finalize with API key and welcome email) for a tenant whose first
        run never completed.
        """
        template_name = config.template_name or self.settings.default_template
        request = config.model_dump()
        request["template_name"] = template_name
        request["tenant_id"] = str(tenant_id)
        ctx = StepContext(config=config, template_name=template_name, tenant_id=tenant_id)
        if resume:
            return await self._submit(self.resume_pipeline, JobKind.resume, request, ctx)
        return await self._submit(self.redeploy_pipeline, JobKind.redeploy, request, ctx)

    async def _submit(
        self,
        pipeline: ProvisioningPipeline,
        kind: JobKind,
        request: dict,
        ctx: StepContext,
    ) -> SubmittedJob:
        subdomain = ctx.config.subdomain
        if self.is_subdomain_in_flight(subdomain):
            raise SubdomainInFlight(subdomain)
        # Reserved before the first await so concurrent submissions see it.
        self._in_flight[subdomain] = None

        try:
            job_id = await self.job_store.create_job(request, kind)
        except BaseException:
            self._in_flight.pop(subdomain, None)
            raise

        self._in_flight[subdomain] = job_id
        task = asyncio.create_task(pipeline.run(job_id, ctx), name=f"{kind.value}-{job_id}")
        self._tasks[job_id] = task
        task.add_done_callback(partial(self._on_done, job_id, subdomain))
        logger.info(f"[{job_id}] {kind.value} job submitted for '{subdomain}'")
        return SubmittedJob(job_id=job_id, task=task)

    def _on_done(self, job_id: str, subdomain: str, task: asyncio.Task) -> None:
        self._tasks.pop(job_id, None)
        if self._in_flight.get(subdomain) == job_id:
            del self._in_flight[subdomain]
        if task.cancelled():
            logger.info(f"[{job_id}] Pipeline task cancelled")
        elif task.exception() is not None:
            logger.error(f"[{job_id}] Pipeline task crashed: {task.exception()!r}")

    def is_running(self, job_id: str) -> bool:
        return job_id in self._tasks

    async def cancel(self, job_id: str) -> bool:
        """
        Cancel a running job and wait for it to settle.

        Returns False when no task is running for the job id.
        """
        task = self._tasks.get(job_id)
        if task is None:
            return False

        task.cancel()
        await asyncio.wait([task])

        # A task cancelled before its first step never records the failure.
        job = await self.job_store.get_job(job_id)
        if not job.is_terminal:
            await self.job_store.set_status(
                job_id,
                JobStatus.failed,
                error="Provisioning cancelled",
                reason=CANCELLED_REASON,
            )
        logger.info(f"[{job_id}] Cancelled")
        return True

    async def wait(self, job_id: str, timeout: Optional[float] = None) -> ProvisioningJob:
        """Wait for a job's pipeline to finish and return the job snapshot"""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.wait([task], timeout=timeout)
        return await self.job_store.get_job(job_id)

    async def sweep(self) -> int:
        removed = await self.job_store.sweep(self.settings.job_retention)
        if removed:
            logger.info(f"Swept {removed} expired provisioning jobs")
        return removed

    async def run_sweeper(self) -> None:
        while True:
            await asyncio.sleep(self.settings.sweep_interval)
            try:
                await self.sweep()
            except Exception:
                logger.exception("Provisioning job sweep failed")

    def start_sweeper(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self.run_sweeper(), name="job-sweeper")

    async def shutdown(self) -> None:
        """Stop the sweeper and cancel every running pipeline"""
        pending = list(self._tasks.values())
        if self._sweeper is not None:
            pending.append(self._sweeper)
            self._sweeper = None
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info(f"Orchestrator stopped ({len(pending)} tasks cancelled)")
