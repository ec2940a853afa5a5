import logging
from pathlib import Path
from uuid import UUID

from src.app.services.hosting_provider import IHostingProvider
from src.domain.entities import DeploymentResult, TenantConfig

logger = logging.getLogger(__name__)


class LocalHostingProvider(IHostingProvider):
    """
    Serves generated instances from the platform itself.

    Always enabled, so it is the usual last entry of the preference list. The
    instance stays where the generator wrote it; the public URL is the
    tenant's platform subdomain.
    """

    name = "local"

    def __init__(self, platform_domain: str, scheme: str = "https"):
        self.platform_domain = platform_domain
        self.scheme = scheme

    @property
    def enabled(self) -> bool:
        return True

    def target_host(self, config: TenantConfig) -> str:
        return self.platform_domain

    async def deploy(
        self, app_path: Path, config: TenantConfig, tenant_id: UUID
    ) -> DeploymentResult:
        url = f"{self.scheme}://{config.subdomain}.{self.platform_domain}"
        logger.info(f"Serving {app_path} locally at {url}")
        return DeploymentResult(
            url=url,
            provider=self.name,
            provider_id=str(app_path),
            status="ready",
        )
