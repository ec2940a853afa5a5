"""
Use Case: Redeploy Tenant

Regenerates and redeploys an existing tenant's application through the
redeploy pipeline. No new tenant record and no new API key, unless the
tenant never finished provisioning; then the remaining provisioning steps
run instead.
"""

from uuid import UUID

from src.app.provisioning.errors import SubdomainInFlight
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.deployment.dtos import ProvisionJobResponse, RedeployTenantCommand
from src.domain.entities import Tenant, TenantConfig
from src.domain.entities.provisioning import DEFAULT_NICHE
from src.libs.result import Error, Result, Return


class RedeployTenantUseCase:
    """
    Redeploy a tenant (admin).

    Business Logic:
    1. Validate tenant exists
    2. Reject while another job holds the tenant's subdomain
    3. Rebuild the configuration from the tenant record
    4. Submit a redeploy job, or a resume job for a never-provisioned tenant
    """

    def __init__(self, uow: UnitOfWork, orchestrator: ProvisioningOrchestrator):
        self.uow = uow
        self.orchestrator = orchestrator

    async def execute(
        self, tenant_id: UUID, command: RedeployTenantCommand
    ) -> Result[ProvisionJobResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

        config = config_from_tenant(tenant, command.template_name)
        # Never provisioned: finish the provisioning steps instead of reactivating.
        resume = tenant.provisioned_at is None
        try:
            submitted = await self.orchestrator.submit_redeploy(tenant.id, config, resume=resume)
        except SubdomainInFlight as exc:
            return Return.err(Error("DEPLOYMENT_IN_PROGRESS", str(exc)))

        return Return.ok(
            ProvisionJobResponse(
                job_id=submitted.job_id,
                status="initializing",
                estimated_time=self.orchestrator.settings.estimated_time,
                message="Tenant provisioning resumed" if resume else "Tenant redeployment started",
                tenant_id=tenant.id,
            )
        )


def config_from_tenant(tenant: Tenant, template_name=None) -> TenantConfig:
    return TenantConfig(
        blog_name=tenant.name,
        subdomain=tenant.subdomain,
        owner_email=tenant.owner_email,
        custom_domain=tenant.custom_domain or tenant.requested_custom_domain,
        company_name=tenant.company_name,
        theme=tenant.theme,
        primary_color=tenant.primary_color,
        niche=tenant.niche or DEFAULT_NICHE,
        template_name=template_name or tenant.template_name,
    )
