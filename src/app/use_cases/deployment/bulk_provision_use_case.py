from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

from .dtos import (
    MAX_BULK_TENANTS,
    BulkProvisionCommand,
    BulkProvisionItem,
    BulkProvisionResponse,
)
from .provision_tenant_use_case import ProvisionTenantUseCase


class BulkProvisionUseCase:
    """
    Start provisioning for up to MAX_BULK_TENANTS tenants at once.

    Each entry is accepted or rejected on its own; one bad entry does not
    stop the others.
    """

    def __init__(self, uow: UnitOfWork, orchestrator: ProvisioningOrchestrator):
        self.uow = uow
        self.orchestrator = orchestrator

    async def execute(self, command: BulkProvisionCommand) -> Result[BulkProvisionResponse]:
        if len(command.tenants) > MAX_BULK_TENANTS:
            return Return.err(
                Error(
                    "TOO_MANY_TENANTS",
                    f"At most {MAX_BULK_TENANTS} tenants per bulk request",
                )
            )

        single = ProvisionTenantUseCase(self.uow, self.orchestrator)
        results = []
        for tenant in command.tenants:
            result = await single.execute(tenant)
            if result.is_ok():
                results.append(
                    BulkProvisionItem(
                        subdomain=tenant.subdomain, accepted=True, job_id=result.value.job_id
                    )
                )
            else:
                results.append(
                    BulkProvisionItem(
                        subdomain=tenant.subdomain,
                        accepted=False,
                        error=result.error.message,
                        error_code=result.error.code,
                    )
                )

        accepted = sum(1 for item in results if item.accepted)
        return Return.ok(
            BulkProvisionResponse(
                results=results,
                accepted=accepted,
                rejected=len(results) - accepted,
                message=f"Bulk provisioning started: {accepted}/{len(results)} tenants",
            )
        )
