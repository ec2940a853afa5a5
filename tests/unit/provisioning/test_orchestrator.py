"""
Unit tests for the provisioning orchestrator: background tasks,
cancellation, subdomain reservation and the retention sweep.
"""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.provisioning.errors import SubdomainInFlight
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.provisioning.pipeline import PipelineStep
from src.app.provisioning.settings import ProvisioningSettings
from src.domain.entities import JobKind, JobStatus, TenantConfig


class StubSteps:
    """Two-step pipelines; `gate` holds the second step until set"""

    def __init__(self):
        self.gate = asyncio.Event()
        self.gate.set()
        self.started = asyncio.Event()
        self.seen = []

    async def first(self, job, ctx):
        self.seen.append((job.job_id, ctx.config.subdomain, ctx.template_name))
        self.started.set()
        return f"{ctx.config.subdomain} created"

    async def second(self, job, ctx):
        await self.gate.wait()
        return f"{ctx.config.subdomain} deployed"

    def provisioning(self):
        return [
            PipelineStep("first", "Starting first", 50, self.first),
            PipelineStep("second", "Starting second", 100, self.second),
        ]

    def redeploy(self):
        return self.provisioning()

    def resume(self):
        return self.provisioning()


def config(subdomain="acme", template_name=None):
    return TenantConfig(
        blog_name=subdomain.title(),
        subdomain=subdomain,
        owner_email=f"owner@{subdomain}.com",
        template_name=template_name,
    )


@pytest.fixture
def steps():
    return StubSteps()


@pytest.fixture
def orchestrator(job_store, steps):
    return ProvisioningOrchestrator(job_store, steps, ProvisioningSettings(step_timeout=None))


@pytest.mark.asyncio
async def test_submit_returns_before_any_step_runs(orchestrator, job_store, steps):
    submitted = await orchestrator.submit(config())

    job = await job_store.get_job(submitted.job_id)
    assert job.status == JobStatus.initializing
    assert job.request["template_name"] == "modern-blog"
    assert steps.seen == []

    job = await orchestrator.wait(submitted.job_id, timeout=5)
    assert job.status == JobStatus.completed
    assert steps.seen == [(submitted.job_id, "acme", "modern-blog")]


@pytest.mark.asyncio
async def test_requested_template_overrides_default(orchestrator, steps):
    submitted = await orchestrator.submit(config(template_name="minimal-blog"))
    await orchestrator.wait(submitted.job_id, timeout=5)

    assert steps.seen[0][2] == "minimal-blog"


@pytest.mark.asyncio
async def test_subdomain_is_reserved_while_job_runs(orchestrator, steps):
    steps.gate.clear()
    submitted = await orchestrator.submit(config())
    await steps.started.wait()

    assert orchestrator.is_subdomain_in_flight("acme")
    assert orchestrator.active_jobs() == {"acme": submitted.job_id}
    with pytest.raises(SubdomainInFlight):
        await orchestrator.submit(config())

    steps.gate.set()
    await orchestrator.wait(submitted.job_id, timeout=5)
    await asyncio.sleep(0)

    assert not orchestrator.is_subdomain_in_flight("acme")
    assert not orchestrator.is_running(submitted.job_id)


@pytest.mark.asyncio
async def test_cancel_running_job(orchestrator, job_store, steps):
    steps.gate.clear()
    submitted = await orchestrator.submit(config())
    await steps.started.wait()

    assert await orchestrator.cancel(submitted.job_id) is True

    job = await job_store.get_job(submitted.job_id)
    assert job.status == JobStatus.failed
    assert job.failure_reason == "CANCELLED"
    assert job.failed_step == "second"
    assert job.progress == 50
    assert submitted.task.cancelled()


@pytest.mark.asyncio
async def test_cancel_before_pipeline_starts(orchestrator, job_store, steps):
    submitted = await orchestrator.submit(config())

    assert await orchestrator.cancel(submitted.job_id) is True

    job = await job_store.get_job(submitted.job_id)
    assert job.status == JobStatus.failed
    assert job.failure_reason == "CANCELLED"
    assert steps.seen == []


@pytest.mark.asyncio
async def test_cancel_unknown_or_finished_job_returns_false(orchestrator):
    assert await orchestrator.cancel("job_missing") is False

    submitted = await orchestrator.submit(config())
    await orchestrator.wait(submitted.job_id, timeout=5)
    await asyncio.sleep(0)
    assert await orchestrator.cancel(submitted.job_id) is False


@pytest.mark.asyncio
async def test_concurrent_jobs_keep_independent_step_logs(orchestrator, job_store):
    submitted = [await orchestrator.submit(config(name)) for name in ("one", "two", "three")]
    await asyncio.gather(*(s.task for s in submitted))

    for name, item in zip(("one", "two", "three"), submitted):
        job = await job_store.get_job(item.job_id)
        assert job.status == JobStatus.completed
        assert [step.message for step in job.steps] == [
            "Starting first",
            f"{name} created",
            "Starting second",
            f"{name} deployed",
        ]


@pytest.mark.asyncio
async def test_submit_redeploy_creates_redeploy_job(orchestrator, job_store):
    tenant_id = uuid4()
    submitted = await orchestrator.submit_redeploy(tenant_id, config())
    job = await orchestrator.wait(submitted.job_id, timeout=5)

    assert job.kind == JobKind.redeploy
    assert job.request["tenant_id"] == str(tenant_id)
    assert job.status == JobStatus.completed


@pytest.mark.asyncio
async def test_submit_redeploy_with_resume_creates_resume_job(orchestrator, job_store):
    submitted = await orchestrator.submit_redeploy(uuid4(), config(), resume=True)
    job = await orchestrator.wait(submitted.job_id, timeout=5)

    assert job.kind == JobKind.resume
    assert job.status == JobStatus.completed


@pytest.mark.asyncio
async def test_sweep_uses_configured_retention(job_store, steps):
    orchestrator = ProvisioningOrchestrator(
        job_store, steps, ProvisioningSettings(job_retention=timedelta(0))
    )
    submitted = await orchestrator.submit(config())
    await orchestrator.wait(submitted.job_id, timeout=5)

    assert await orchestrator.sweep() == 1
    assert await job_store.list_jobs() == []


@pytest.mark.asyncio
async def test_shutdown_cancels_running_jobs(orchestrator, job_store, steps):
    steps.gate.clear()
    orchestrator.start_sweeper()
    submitted = await orchestrator.submit(config())
    await steps.started.wait()

    await orchestrator.shutdown()

    job = await job_store.get_job(submitted.job_id)
    assert job.failure_reason == "CANCELLED"
