"""
Unit tests for the in-memory job store state machine.
"""

from datetime import timedelta

import pytest

from src.app.provisioning.errors import InvalidJobTransition, JobNotFound
from src.domain.entities import JobKind, JobStatus


@pytest.mark.asyncio
async def test_create_job_returns_unique_ids_in_initializing_state(job_store):
    first = await job_store.create_job({"subdomain": "one"})
    second = await job_store.create_job({"subdomain": "two"}, JobKind.redeploy)

    assert first != second
    job = await job_store.get_job(first)
    assert job.status == JobStatus.initializing
    assert job.progress == 0
    assert job.request == {"subdomain": "one"}
    assert (await job_store.get_job(second)).kind == JobKind.redeploy


@pytest.mark.asyncio
async def test_progress_never_decreases(job_store):
    job_id = await job_store.create_job({})
    await job_store.set_status(job_id, JobStatus.running, progress=10)
    await job_store.set_progress(job_id, 40)

    with pytest.raises(InvalidJobTransition):
        await job_store.set_progress(job_id, 25)
    assert (await job_store.get_job(job_id)).progress == 40


@pytest.mark.asyncio
async def test_progress_reaches_100_only_on_completion(job_store):
    job_id = await job_store.create_job({})
    await job_store.set_status(job_id, JobStatus.running, progress=10)

    with pytest.raises(InvalidJobTransition):
        await job_store.set_progress(job_id, 100)
    with pytest.raises(InvalidJobTransition):
        await job_store.set_status(job_id, JobStatus.completed)
    with pytest.raises(InvalidJobTransition):
        await job_store.set_progress(job_id, 101)

    await job_store.set_status(job_id, JobStatus.completed, progress=100)
    job = await job_store.get_job(job_id)
    assert job.status == JobStatus.completed
    assert job.progress == 100


@pytest.mark.asyncio
async def test_terminal_states_absorb(job_store):
    job_id = await job_store.create_job({})
    await job_store.set_status(job_id, JobStatus.running, progress=10)
    await job_store.set_status(job_id, JobStatus.failed, error="boom", reason="INTERNAL_ERROR")

    with pytest.raises(InvalidJobTransition):
        await job_store.set_status(job_id, JobStatus.running)
    with pytest.raises(InvalidJobTransition):
        await job_store.set_progress(job_id, 50)
    with pytest.raises(InvalidJobTransition):
        await job_store.append_step(job_id, "late")

    job = await job_store.get_job(job_id)
    assert job.error == "boom"
    assert job.failure_reason == "INTERNAL_ERROR"
    assert job.finished_at is not None


@pytest.mark.asyncio
async def test_initializing_job_may_fail_but_not_complete(job_store):
    job_id = await job_store.create_job({})
    with pytest.raises(InvalidJobTransition):
        await job_store.set_status(job_id, JobStatus.completed, progress=100)

    await job_store.set_status(job_id, JobStatus.failed, reason="CANCELLED")
    assert (await job_store.get_job(job_id)).status == JobStatus.failed


@pytest.mark.asyncio
async def test_readers_get_snapshots(job_store):
    job_id = await job_store.create_job({})
    await job_store.append_step(job_id, "one")

    snapshot = await job_store.get_job(job_id)
    snapshot.steps.append(snapshot.steps[0])
    snapshot.progress = 99
    await job_store.append_step(job_id, "two")

    job = await job_store.get_job(job_id)
    assert [step.message for step in job.steps] == ["one", "two"]
    assert job.progress == 0
    assert len(snapshot.steps) == 2


@pytest.mark.asyncio
async def test_unknown_job_raises_job_not_found(job_store):
    with pytest.raises(JobNotFound):
        await job_store.get_job("job_missing")
    with pytest.raises(JobNotFound):
        await job_store.append_step("job_missing", "x")


@pytest.mark.asyncio
async def test_update_job_accepts_only_result_fields(job_store):
    job_id = await job_store.create_job({})
    await job_store.update_job(job_id, deployment_url="https://acme.test", api_key="fb_x")

    job = await job_store.get_job(job_id)
    assert job.deployment_url == "https://acme.test"
    assert job.api_key == "fb_x"

    with pytest.raises(ValueError):
        await job_store.update_job(job_id, status=JobStatus.completed)


@pytest.mark.asyncio
async def test_sweep_removes_only_old_terminal_jobs(job_store):
    old_done = await job_store.create_job({})
    await job_store.set_status(old_done, JobStatus.failed, reason="CANCELLED")
    old_running = await job_store.create_job({})
    await job_store.set_status(old_running, JobStatus.running, progress=10)
    fresh_done = await job_store.create_job({})
    await job_store.set_status(fresh_done, JobStatus.failed, reason="CANCELLED")

    for job_id in (old_done, old_running):
        job_store._jobs[job_id].started_at -= timedelta(hours=25)

    removed = await job_store.sweep(timedelta(hours=24))

    assert removed == 1
    remaining = {job.job_id for job in await job_store.list_jobs()}
    assert remaining == {old_running, fresh_done}
