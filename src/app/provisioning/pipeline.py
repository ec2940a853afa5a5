"""
Provisioning pipeline executor.

A pipeline is an ordered list of named steps. The executor runs them strictly
in order, records a step-log entry and a progress checkpoint after each
success, and aborts on the first failure:

    initializing -> running -> completed | failed

A failed job keeps the progress of its last successful checkpoint. Already
applied steps (tenant record, generated files, DNS records) are not rolled
back.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from src.app.provisioning.context import StepContext
from src.app.provisioning.errors import (
    InvalidJobTransition,
    JobNotFound,
    ProvisioningError,
    StepTimeout,
)
from src.app.repositories.job_store import IJobStore
from src.domain.entities import JobStatus, ProvisioningJob

logger = logging.getLogger(__name__)

START_PROGRESS = 10

CANCELLED_REASON = "CANCELLED"
INTERNAL_ERROR_REASON = "INTERNAL_ERROR"

StepFunction = Callable[[ProvisioningJob, StepContext], Awaitable[str]]


@dataclass(frozen=True)
class PipelineStep:
    """
    One named step.

    `description` is logged when the step starts, the string returned by
    `run` when it succeeds; `checkpoint` is the progress reached on success.
    """

    name: str
    description: str
    checkpoint: int
    run: StepFunction

    @property
    def label(self) -> str:
        return self.name.replace("_", " ")


class ProvisioningPipeline:
    """Generic executor for an ordered list of PipelineSteps"""

    def __init__(
        self,
        job_store: IJobStore,
        steps: Sequence[PipelineStep],
        step_timeout: Optional[float] = None,
        start_progress: int = START_PROGRESS,
    ):
        _check_checkpoints(steps, start_progress)
        self.job_store = job_store
        self.steps: List[PipelineStep] = list(steps)
        self.step_timeout = step_timeout
        self.start_progress = start_progress

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]

    async def run(self, job_id: str, ctx: StepContext) -> ProvisioningJob:
        """
        Execute every step for one job.

        Never raises for step failures: they end up on the job record.
        Task cancellation is recorded as a failure and then re-raised.
        """
        ctx.job_id = job_id
        current: Optional[PipelineStep] = None
        try:
            await self.job_store.set_status(
                job_id, JobStatus.running, progress=self.start_progress
            )
            logger.info(f"[{job_id}] Provisioning started ({len(self.steps)} steps)")

            for index, step in enumerate(self.steps):
                current = step
                job = await self.job_store.get_job(job_id)
                await self.job_store.append_step(job_id, step.description)
                logger.info(f"[{job_id}] {step.description}")

                try:
                    message = await self._run_step(step, job, ctx)
                except ProvisioningError as exc:
                    await self._fail(job_id, ctx, step, exc.message, exc.code)
                    return await self.job_store.get_job(job_id)
                except (InvalidJobTransition, JobNotFound):
                    raise
                except Exception as exc:
                    logger.exception(f"[{job_id}] Unexpected error in step '{step.name}'")
                    await self._fail(
                        job_id,
                        ctx,
                        step,
                        str(exc) or exc.__class__.__name__,
                        INTERNAL_ERROR_REASON,
                    )
                    return await self.job_store.get_job(job_id)

                await self._record_results(job_id, ctx)
                await self.job_store.append_step(job_id, message)
                logger.info(f"[{job_id}] {message}")

                if index == len(self.steps) - 1:
                    await self.job_store.set_status(
                        job_id, JobStatus.completed, progress=step.checkpoint
                    )
                else:
                    await self.job_store.set_progress(job_id, step.checkpoint)

            logger.info(f"[{job_id}] Provisioning completed")
            return await self.job_store.get_job(job_id)

        except asyncio.CancelledError:
            await self._fail(job_id, ctx, current, "Provisioning cancelled", CANCELLED_REASON)
            raise

    async def _run_step(
        self, step: PipelineStep, job: ProvisioningJob, ctx: StepContext
    ) -> str:
        if self.step_timeout is None:
            return await step.run(job, ctx)
        try:
            return await asyncio.wait_for(step.run(job, ctx), timeout=self.step_timeout)
        except asyncio.TimeoutError:
            raise StepTimeout(step.name, self.step_timeout)

    async def _record_results(self, job_id: str, ctx: StepContext) -> None:
        fields = ctx.job_fields()
        if fields:
            await self.job_store.update_job(job_id, **fields)
        await self._record_warnings(job_id, ctx)

    async def _record_warnings(self, job_id: str, ctx: StepContext) -> None:
        while ctx.warnings:
            warning = ctx.warnings.pop(0)
            logger.warning(f"[{job_id}] {warning}")
            await self.job_store.add_warning(job_id, warning)

    async def _fail(
        self,
        job_id: str,
        ctx: StepContext,
        step: Optional[PipelineStep],
        message: str,
        reason: str,
    ) -> None:
        step_name = step.name if step else None
        if step:
            logger.error(f"[{job_id}] Step '{step.name}' failed ({reason}): {message}")
        else:
            logger.error(f"[{job_id}] Provisioning failed before any step ({reason}): {message}")
        try:
            # Warnings raised before the failure are kept on the job.
            await self._record_warnings(job_id, ctx)
            if step:
                await self.job_store.append_step(job_id, f"Failed to {step.label}: {message}")
            await self.job_store.set_status(
                job_id,
                JobStatus.failed,
                error=message,
                reason=reason,
                failed_step=step_name,
            )
        except (InvalidJobTransition, JobNotFound) as exc:
            logger.warning(f"[{job_id}] Could not record failure: {exc}")


def _check_checkpoints(steps: Sequence[PipelineStep], start_progress: int) -> None:
    if not steps:
        raise ValueError("A pipeline needs at least one step")
    previous = start_progress
    for step in steps:
        if step.checkpoint <= previous:
            raise ValueError(
                f"Checkpoint of step '{step.name}' ({step.checkpoint}) must exceed {previous}"
            )
        previous = step.checkpoint
    if previous != 100:
        raise ValueError("The last step must reach checkpoint 100")
