import logging
from typing import Optional, Sequence

from src.app.provisioning.context import UnitOfWorkFactory
from src.app.provisioning.credentials import issue_api_key
from src.app.provisioning.errors import FinalizationError, ProvisioningError
from src.app.provisioning.providers import first_enabled
from src.app.services.email_provider import IEmailProvider, WelcomeEmail
from src.domain.base import utcnow
from src.domain.entities import (
    AuditEvent,
    DeploymentResult,
    FinalizationResult,
    Tenant,
    TenantConfig,
    TenantStatus,
)

logger = logging.getLogger(__name__)


class Finalizer:
    """
    Last provisioning step.

    Activates the tenant and issues its initial API key in one transaction,
    then sends the welcome email. The email is best effort: a missing
    provider or a send failure only adds a warning.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        email_providers: Sequence[IEmailProvider],
        support_email: str,
        credentials_endpoint: Optional[str] = None,
    ):
        self.uow_factory = uow_factory
        self.email_providers = list(email_providers)
        self.support_email = support_email
        self.credentials_endpoint = credentials_endpoint

    async def finalize(
        self,
        tenant: Tenant,
        deployment: DeploymentResult,
        config: TenantConfig,
        job_id: Optional[str] = None,
    ) -> FinalizationResult:
        try:
            api_key, api_key_id = await self._activate(tenant, deployment, job_id)
        except ProvisioningError:
            raise
        except Exception as exc:
            raise FinalizationError(f"Failed to activate tenant: {exc}") from exc

        warnings = []
        sent = await self._send_welcome(tenant, deployment, config, warnings)
        return FinalizationResult(
            api_key=api_key,
            api_key_id=api_key_id,
            notification_sent=sent,
            warnings=warnings,
        )

    async def _activate(self, tenant: Tenant, deployment: DeploymentResult, job_id):
        async with self.uow_factory() as uow:
            record = await uow.tenants.get_by_id(tenant.id)
            if record is None:
                raise FinalizationError(f"Tenant {tenant.id} not found")

            owner = await uow.users.get_by_tenant_and_email(record.id, record.owner_email)

            now = utcnow()
            record.status = TenantStatus.active
            record.provisioned_at = now
            record.deactivated_at = None
            record.deployment_url = deployment.url
            record.updated_at = now
            await uow.tenants.update(record)

            plaintext, key = issue_api_key(
                record.id, created_by=owner.id if owner else None
            )
            key = await uow.api_keys.create(key)

            await uow.audit_events.create(
                AuditEvent(
                    tenant_id=record.id,
                    action="tenant_provisioned",
                    event_metadata={
                        "job_id": job_id,
                        "deployment_url": deployment.url,
                        "provider": deployment.provider,
                        "api_key_prefix": key.key_prefix,
                    },
                )
            )
            await uow.commit()

        logger.info(f"Tenant {record.subdomain} activated (key {key.key_prefix}...)")
        return plaintext, key.id

    async def _send_welcome(
        self,
        tenant: Tenant,
        deployment: DeploymentResult,
        config: TenantConfig,
        warnings: list,
    ) -> bool:
        provider = first_enabled(self.email_providers)
        if provider is None:
            warnings.append("Welcome email not sent: no email provider configured")
            return False

        email = WelcomeEmail(
            to=tenant.owner_email,
            subject=f"Your blog {config.blog_name} is live!",
            data={
                "blog_name": config.blog_name,
                "owner_name": config.owner_name or "there",
                "blog_url": deployment.url,
                "admin_url": f"{deployment.url.rstrip('/')}/admin",
                "subdomain": tenant.subdomain,
                "custom_domain": tenant.custom_domain,
                "credentials_endpoint": self.credentials_endpoint,
                "support_email": self.support_email,
            },
        )
        try:
            message_id = await provider.send_welcome(email)
        except Exception as exc:
            logger.warning(f"Welcome email to {email.to} via {provider.name} failed: {exc}")
            warnings.append(f"Welcome email not sent: {exc}")
            return False

        logger.info(f"Welcome email sent to {email.to} via {provider.name} ({message_id})")
        return True
