"""
Use Case: Deactivate Tenant

Takes a tenant offline without deleting anything. The tenant record,
generated application and DNS records stay in place; redeploying
reactivates it.
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.deployment.dtos import DeactivateTenantResponse
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, TenantStatus
from src.libs.result import Error, Result, Return


class DeactivateTenantUseCase:
    """
    Deactivate a tenant (admin).

    Idempotent: deactivating an inactive tenant succeeds and keeps the
    original deactivation time.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[DeactivateTenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            if tenant.status != TenantStatus.inactive:
                now = utcnow()
                previous = tenant.status
                tenant.status = TenantStatus.inactive
                tenant.deactivated_at = now
                tenant.updated_at = now
                await self.uow.tenants.update(tenant)

                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=tenant.id,
                        action="tenant_deactivated",
                        event_metadata={"previous_status": previous.value},
                    )
                )
                await self.uow.commit()

            return Return.ok(
                DeactivateTenantResponse(
                    tenant_id=tenant.id,
                    status=tenant.status.value,
                    deactivated_at=tenant.deactivated_at,
                )
            )
