"""
Use Case: Get Tenant Deployment

Read-only view of where and how a tenant is deployed.
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.deployment.dtos import TenantDeploymentResponse
from src.libs.result import Error, Result, Return


class GetTenantDeploymentUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[TenantDeploymentResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            return Return.ok(TenantDeploymentResponse.from_tenant(tenant))
