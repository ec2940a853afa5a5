"""
Unit tests for the job tracking use cases: status, listing, cancellation,
cleanup and subdomain availability.
"""

from datetime import timedelta

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.deployment import (
    CancelJobUseCase,
    CheckSubdomainUseCase,
    CleanupJobsUseCase,
    GetJobStatusUseCase,
    ListJobsUseCase,
    ListTemplatesUseCase,
)
from src.domain.entities import JobStatus, TemplateDescriptor


async def running_job(store, subdomain="acme"):
    job_id = await store.create_job({"subdomain": subdomain})
    await store.set_status(job_id, JobStatus.running)
    await store.append_step(job_id, "Creating tenant database record")
    await store.set_progress(job_id, 25)
    return job_id


@pytest.mark.asyncio
async def test_get_job_status(job_store):
    job_id = await running_job(job_store)

    result = await GetJobStatusUseCase(job_store).execute(job_id)

    assert result.is_ok()
    view = result.value
    assert view.status == JobStatus.running
    assert view.progress == 25
    assert view.subdomain == "acme"
    assert [s.message for s in view.steps] == ["Creating tenant database record"]

    dumped = view.model_dump(by_alias=True)
    assert "jobId" in dumped
    assert "failureReason" in dumped


@pytest.mark.asyncio
async def test_get_job_status_not_found(job_store):
    result = await GetJobStatusUseCase(job_store).execute("job_missing")

    assert result.error.code == "JOB_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_jobs_filters_by_status(job_store):
    running = await running_job(job_store, "acme")
    failed = await running_job(job_store, "globex")
    await job_store.set_status(failed, JobStatus.failed, error="boom", reason="INTERNAL_ERROR")

    everything = await ListJobsUseCase(job_store).execute()
    only_failed = await ListJobsUseCase(job_store).execute(JobStatus.failed)

    assert everything.value.total == 2
    assert [j.job_id for j in only_failed.value.jobs] == [failed]
    assert only_failed.value.jobs[0].failure_reason == "INTERNAL_ERROR"
    assert running not in [j.job_id for j in only_failed.value.jobs]


@pytest.mark.asyncio
async def test_cancel_running_job(orchestrator):
    store = orchestrator.job_store
    job_id = await running_job(store)

    async def cancel(job_id):
        await store.set_status(job_id, JobStatus.failed, error="Job cancelled", reason="CANCELLED")
        return True

    orchestrator.cancel = AsyncMock(side_effect=cancel)

    result = await CancelJobUseCase(orchestrator).execute(job_id)

    assert result.is_ok()
    assert result.value.status == JobStatus.failed
    assert result.value.failure_reason == "CANCELLED"
    assert result.value.progress == 25


@pytest.mark.asyncio
async def test_cancel_finished_job(orchestrator):
    store = orchestrator.job_store
    job_id = await running_job(store)
    await store.set_status(job_id, JobStatus.failed, error="boom")
    orchestrator.cancel = AsyncMock()

    result = await CancelJobUseCase(orchestrator).execute(job_id)

    assert result.error.code == "JOB_ALREADY_FINISHED"
    orchestrator.cancel.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_unknown_job(orchestrator):
    result = await CancelJobUseCase(orchestrator).execute("job_missing")

    assert result.error.code == "JOB_NOT_FOUND"


@pytest.mark.asyncio
async def test_cancel_job_without_task(orchestrator):
    job_id = await running_job(orchestrator.job_store)
    orchestrator.cancel = AsyncMock(return_value=False)

    result = await CancelJobUseCase(orchestrator).execute(job_id)

    assert result.error.code == "JOB_NOT_RUNNING"


@pytest.mark.asyncio
async def test_cleanup_reports_removed_and_remaining(orchestrator):
    store = orchestrator.job_store
    finished = await running_job(store, "acme")
    await store.set_status(finished, JobStatus.failed, error="boom")
    await running_job(store, "globex")

    async def sweep():
        return await store.sweep(timedelta(0))

    orchestrator.sweep = AsyncMock(side_effect=sweep)

    result = await CleanupJobsUseCase(orchestrator).execute()

    assert result.value.removed == 1
    assert result.value.remaining == 1


@pytest.mark.asyncio
async def test_list_templates():
    registry = MagicMock()
    registry.list_templates.return_value = [
        TemplateDescriptor(name="modern-blog", description="Modern", version="1.0.0")
    ]

    result = await ListTemplatesUseCase(registry).execute()

    assert [t.name for t in result.value] == ["modern-blog"]


@pytest.mark.asyncio
async def test_subdomain_available(tenants_uow, orchestrator):
    result = await CheckSubdomainUseCase(tenants_uow, orchestrator).execute("Acme")

    assert result.value.subdomain == "acme"
    assert result.value.available is True
    assert result.value.reason is None


@pytest.mark.asyncio
async def test_subdomain_taken(tenants_uow, orchestrator, tenant):
    tenants_uow.tenants.get_by_subdomain = AsyncMock(return_value=tenant)

    result = await CheckSubdomainUseCase(tenants_uow, orchestrator).execute("acme")

    assert result.value.available is False
    assert result.value.reason == "Subdomain is already taken"


@pytest.mark.asyncio
async def test_subdomain_being_provisioned(tenants_uow, orchestrator):
    orchestrator.is_subdomain_in_flight = MagicMock(return_value=True)

    result = await CheckSubdomainUseCase(tenants_uow, orchestrator).execute("acme")

    assert result.value.available is False
    assert result.value.reason == "Provisioning in progress"


@pytest.mark.asyncio
async def test_subdomain_malformed(tenants_uow, orchestrator):
    result = await CheckSubdomainUseCase(tenants_uow, orchestrator).execute("a")

    assert result.error.code == "VALIDATION_ERROR"
