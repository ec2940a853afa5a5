"""
Use Case: Verify Domain

Webhook called by the DNS/certificate side once a custom domain's
certificate is issued (or revoked).
"""

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.deployment.dtos import VerifyDomainCommand, VerifyDomainResponse
from src.domain.base import utcnow
from src.domain.entities import AuditEvent
from src.libs.result import Error, Result, Return

VERIFIED_STATUS = "verified"


class VerifyDomainUseCase:
    """
    Record a domain verification result.

    Business Logic:
    1. Resolve the tenant by id when given, otherwise by custom domain
    2. The domain must be the tenant's custom domain (DOMAIN_MISMATCH)
    3. status "verified" sets domain_verified; anything else clears it
    4. Create audit event
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: VerifyDomainCommand) -> Result[VerifyDomainResponse]:
        domain = command.domain.strip().lower().rstrip(".")

        async with self.uow:
            if command.tenant_id:
                tenant = await self.uow.tenants.get_by_id(command.tenant_id)
            else:
                tenant = await self.uow.tenants.get_by_custom_domain(domain)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "No tenant for this domain"))

            if tenant.custom_domain != domain:
                return Return.err(
                    Error("DOMAIN_MISMATCH", f"Domain '{domain}' does not belong to this tenant")
                )

            verified = command.status.lower() == VERIFIED_STATUS
            now = utcnow()
            tenant.domain_verified = verified
            tenant.domain_verified_at = now if verified else None
            tenant.updated_at = now
            await self.uow.tenants.update(tenant)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant.id,
                    action="domain_verified" if verified else "domain_unverified",
                    event_metadata={"domain": domain, "status": command.status},
                )
            )
            await self.uow.commit()

            return Return.ok(
                VerifyDomainResponse(tenant_id=tenant.id, domain=domain, domain_verified=verified)
            )
