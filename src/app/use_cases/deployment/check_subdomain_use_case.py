from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.validation import check_subdomain
from src.libs.result import Error, Result, Return

from .dtos import SubdomainAvailabilityResponse


class CheckSubdomainUseCase:
    """
    Is a subdomain free to provision?

    A malformed subdomain is a VALIDATION_ERROR; a well-formed one is
    unavailable when a tenant holds it or a running job is creating it.
    """

    def __init__(self, uow: UnitOfWork, orchestrator: ProvisioningOrchestrator):
        self.uow = uow
        self.orchestrator = orchestrator

    async def execute(self, subdomain: str) -> Result[SubdomainAvailabilityResponse]:
        subdomain = subdomain.strip().lower()
        error = check_subdomain(subdomain)
        if error:
            return Return.err(Error("VALIDATION_ERROR", error))

        if self.orchestrator.is_subdomain_in_flight(subdomain):
            return Return.ok(
                SubdomainAvailabilityResponse(
                    subdomain=subdomain, available=False, reason="Provisioning in progress"
                )
            )

        async with self.uow:
            tenant = await self.uow.tenants.get_by_subdomain(subdomain)

        return Return.ok(
            SubdomainAvailabilityResponse(
                subdomain=subdomain,
                available=tenant is None,
                reason="Subdomain is already taken" if tenant else None,
            )
        )
