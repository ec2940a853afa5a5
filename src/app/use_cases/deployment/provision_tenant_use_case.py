"""
Use Case: Provision Tenant

Validates a provisioning request, rejects taken subdomains, and hands the
request to the orchestrator. Returns as soon as the job exists; the
pipeline runs in the background.
"""

import logging

from src.app.provisioning.errors import SubdomainInFlight
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.validation import validate_tenant_config
from src.libs.result import Error, Result, Return

from .dtos import ProvisionJobResponse, ProvisionTenantCommand

logger = logging.getLogger(__name__)


class ProvisionTenantUseCase:
    """
    Start provisioning a new tenant.

    Business Logic:
    1. Validate the request (subdomain format, custom domain, color)
    2. Reject a subdomain held by a tenant or by a running job
    3. Reject a custom domain already claimed by a tenant
    4. Create the job and start the pipeline
    """

    def __init__(self, uow: UnitOfWork, orchestrator: ProvisioningOrchestrator):
        self.uow = uow
        self.orchestrator = orchestrator

    async def execute(self, command: ProvisionTenantCommand) -> Result[ProvisionJobResponse]:
        config = command.to_config()

        error = validate_tenant_config(config, self.orchestrator.settings.platform_domain)
        if error:
            return Return.err(Error("VALIDATION_ERROR", error))

        if self.orchestrator.is_subdomain_in_flight(config.subdomain):
            return Return.err(_subdomain_taken(config.subdomain))

        async with self.uow:
            if await self.uow.tenants.get_by_subdomain(config.subdomain):
                return Return.err(_subdomain_taken(config.subdomain))
            if config.custom_domain and await self.uow.tenants.get_by_custom_domain(
                config.custom_domain
            ):
                return Return.err(
                    Error("DOMAIN_EXISTS", f"Domain '{config.custom_domain}' is already in use")
                )

        try:
            submitted = await self.orchestrator.submit(config)
        except SubdomainInFlight:
            return Return.err(_subdomain_taken(config.subdomain))

        logger.info(f"Provisioning accepted for '{config.subdomain}' as {submitted.job_id}")
        return Return.ok(
            ProvisionJobResponse(
                job_id=submitted.job_id,
                status="initializing",
                estimated_time=self.orchestrator.settings.estimated_time,
            )
        )


def _subdomain_taken(subdomain: str) -> Error:
    return Error("SUBDOMAIN_EXISTS", f"Subdomain '{subdomain}' is already taken")
