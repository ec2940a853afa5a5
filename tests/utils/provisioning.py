import asyncio
from typing import Optional

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import ProvisioningJob, Tenant


async def wait_for_progress(
    job_store, job_id: str, progress: int, timeout: float = 5.0
) -> ProvisioningJob:
    """Poll until a job reaches a progress checkpoint"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        job = await job_store.get_job(job_id)
        if job.progress >= progress or job.is_terminal:
            return job
        if loop.time() > deadline:
            raise AssertionError(f"Job {job_id} stuck at {job.progress}%")
        await asyncio.sleep(0.01)


async def load_tenant(session_factory, subdomain: str) -> Optional[Tenant]:
    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            return await uow.tenants.get_by_subdomain(subdomain)


async def load_tenant_data(session_factory, tenant: Tenant) -> dict:
    """Owner, seeded rows, keys and audit trail of a tenant"""
    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            return {
                "owner": await uow.users.get_by_tenant_and_email(tenant.id, tenant.owner_email),
                "categories": await uow.categories.list_by_tenant(tenant.id),
                "tags": await uow.tags.list_by_tenant(tenant.id),
                "api_keys": await uow.api_keys.list_by_tenant(tenant.id),
                "audit_events": await uow.audit_events.list_by_tenant(tenant.id),
            }
