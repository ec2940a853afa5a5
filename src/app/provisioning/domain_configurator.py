import logging
from typing import Optional, Sequence

from src.app.provisioning.context import UnitOfWorkFactory
from src.app.provisioning.errors import (
    DnsProviderUnavailable,
    DomainAlreadyInUse,
    ProvisioningError,
    TenantRecordError,
)
from src.app.provisioning.providers import first_enabled
from src.app.services.dns_provider import DnsRecord, IDnsProvider
from src.domain.base import utcnow
from src.domain.entities import (
    DomainConfig,
    DomainKind,
    DomainState,
    Tenant,
    VerificationStatus,
)
from src.domain.validation import is_platform_host

logger = logging.getLogger(__name__)


class DomainConfigurator:
    """
    Wires a tenant's domains.

    The default `<subdomain>.<platform domain>` route is always active (it is
    served by the platform's wildcard record and certificate). A requested
    custom domain additionally gets a CNAME to the deployment target through
    the first enabled DNS provider, followed by a certificate status check.
    DNS failures are surfaced as DnsProviderUnavailable and never retried
    here.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        dns_providers: Sequence[IDnsProvider],
        platform_domain: str,
    ):
        self.uow_factory = uow_factory
        self.dns_providers = list(dns_providers)
        self.platform_domain = platform_domain

    def subdomain_host(self, subdomain: str) -> str:
        return f"{subdomain}.{self.platform_domain}"

    async def configure(
        self,
        tenant: Tenant,
        deployment_target: Optional[str],
        custom_domain: Optional[str] = None,
    ) -> DomainConfig:
        domains = [
            DomainState(
                name=self.subdomain_host(tenant.subdomain),
                kind=DomainKind.subdomain,
                active=True,
                verification=VerificationStatus.active,
            )
        ]

        if custom_domain:
            domains.append(
                await self._configure_custom_domain(tenant, custom_domain, deployment_target)
            )

        config = DomainConfig(domains=domains, target_host=deployment_target)
        await self._save(tenant, config, custom_domain)
        return config

    async def _configure_custom_domain(
        self, tenant: Tenant, domain: str, target: Optional[str]
    ) -> DomainState:
        platform_owner = None
        async with self.uow_factory() as uow:
            owner = await uow.tenants.get_by_custom_domain(domain)
            if is_platform_host(domain, self.platform_domain):
                label = domain[: -len(self.platform_domain) - 1].rsplit(".", 1)[-1]
                platform_owner = await uow.tenants.get_by_subdomain(label)
        if owner is not None and owner.id != tenant.id:
            raise DomainAlreadyInUse(domain, "is already claimed by another tenant")

        # Platform hosts are served by the wildcard route, never by a CNAME.
        if platform_owner is not None and platform_owner.id != tenant.id:
            raise DomainAlreadyInUse(domain, "is the platform host of another tenant")
        if is_platform_host(domain, self.platform_domain):
            raise DomainAlreadyInUse(domain, "is under the platform domain")

        if not target:
            raise DnsProviderUnavailable(
                f"No deployment target to point custom domain '{domain}' at"
            )

        dns = first_enabled(self.dns_providers)
        if dns is None:
            raise DnsProviderUnavailable(
                f"No DNS provider configured for custom domain '{domain}'"
            )

        try:
            record = await self._ensure_cname(dns, domain, target)
            verification = await dns.certificate_status(domain)
        except ProvisioningError:
            raise
        except Exception as exc:
            raise DnsProviderUnavailable(f"{dns.name} DNS setup failed: {exc}") from exc

        logger.info(
            f"Custom domain {domain} -> {target} via {dns.name} "
            f"(record {record.id}, certificate {verification.value})"
        )
        return DomainState(
            name=domain,
            kind=DomainKind.custom,
            active=True,
            verification=verification,
            record_id=record.id,
        )

    async def _ensure_cname(self, dns: IDnsProvider, domain: str, target: str) -> DnsRecord:
        # Existing records are reused only when they already point at the target.
        existing = await dns.find_record(domain)
        if existing is None:
            return await dns.create_cname(domain, target)
        if existing.type.upper() == "CNAME" and _same_host(existing.content, target):
            logger.info(f"Reusing existing CNAME record {existing.id} for {domain}")
            return existing
        raise DomainAlreadyInUse(
            domain, f"already has a {existing.type} record pointing at {existing.content}"
        )

    async def _save(
        self, tenant: Tenant, config: DomainConfig, custom_domain: Optional[str]
    ) -> None:
        async with self.uow_factory() as uow:
            record = await uow.tenants.get_by_id(tenant.id)
            if record is None:
                raise TenantRecordError(f"Tenant {tenant.id} not found")

            primary = config.primary
            record.custom_domain = custom_domain or record.custom_domain
            record.domain_configured = True
            record.domain_verified = primary.verification == VerificationStatus.active
            if record.domain_verified and record.domain_verified_at is None:
                record.domain_verified_at = utcnow()
            record.deployment_url = f"https://{primary.name}"
            record.updated_at = utcnow()
            await uow.tenants.update(record)
            await uow.commit()


def _same_host(left: str, right: str) -> bool:
    return left.rstrip(".").lower() == right.rstrip(".").lower()
