import logging
from pathlib import Path
from typing import Sequence
from uuid import UUID

from src.app.provisioning.context import UnitOfWorkFactory
from src.app.provisioning.errors import (
    DeploymentProviderUnavailable,
    ProvisioningError,
    TenantRecordError,
)
from src.app.provisioning.providers import select_provider
from src.app.services.hosting_provider import IHostingProvider
from src.domain.base import utcnow
from src.domain.entities import DeploymentResult, TenantConfig

logger = logging.getLogger(__name__)


class DeploymentExecutor:
    """Pushes an application instance to the first enabled hosting provider"""

    def __init__(self, uow_factory: UnitOfWorkFactory, providers: Sequence[IHostingProvider]):
        self.uow_factory = uow_factory
        self.providers = list(providers)

    def provider(self) -> IHostingProvider:
        return select_provider(self.providers, "hosting")

    def target_host(self, config: TenantConfig) -> str:
        return self.provider().target_host(config)

    async def deploy(
        self, app_path: Path, config: TenantConfig, tenant_id: UUID
    ) -> DeploymentResult:
        provider = self.provider()
        logger.info(f"Deploying {config.subdomain} from {app_path} via {provider.name}")

        try:
            result = await provider.deploy(app_path, config, tenant_id)
        except ProvisioningError:
            raise
        except Exception as exc:
            raise DeploymentProviderUnavailable(
                f"{provider.name} deployment failed: {exc}"
            ) from exc

        if result.deployed_at is None:
            result = result.model_copy(update={"deployed_at": utcnow()})

        async with self.uow_factory() as uow:
            tenant = await uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                raise TenantRecordError(f"Tenant {tenant_id} not found")
            tenant.deployment_url = result.url
            tenant.deployment_provider = result.provider
            tenant.deployment_provider_id = result.provider_id
            tenant.deployed_at = result.deployed_at
            tenant.updated_at = utcnow()
            await uow.tenants.update(tenant)
            await uow.commit()

        logger.info(f"Deployed {config.subdomain} to {result.url}")
        return result
