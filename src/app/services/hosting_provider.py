from abc import abstractmethod
from pathlib import Path
from uuid import UUID

from src.app.services.provider import IProvider
from src.domain.entities import DeploymentResult, TenantConfig


class IHostingProvider(IProvider):
    """Hosting provider interface - pushes an application instance live"""

    @abstractmethod
    def target_host(self, config: TenantConfig) -> str:
        """Hostname a custom domain's CNAME must point at"""
        pass

    @abstractmethod
    async def deploy(
        self, app_path: Path, config: TenantConfig, tenant_id: UUID
    ) -> DeploymentResult:
        """Create the site/project, trigger build+deploy, return the public URL"""
        pass
