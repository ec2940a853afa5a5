import asyncio
import logging
from pathlib import Path
from typing import Optional
from uuid import UUID

import httpx

from src.adapter.providers.bundle import inline_files
from src.adapter.providers.http import HttpProvider
from src.app.services.hosting_provider import IHostingProvider
from src.domain.entities import DeploymentResult, TenantConfig

logger = logging.getLogger(__name__)

VERCEL_CNAME_TARGET = "cname.vercel-dns.com"


class VercelProvider(HttpProvider, IHostingProvider):
    """
    Creates a Vercel project per tenant and uploads the generated instance
    as an inline-files production deployment. Vercel runs the build.
    """

    name = "vercel"
    base_url = "https://api.vercel.com"

    def __init__(
        self,
        token: Optional[str],
        project_prefix: str = "blog",
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.token = token
        self.project_prefix = project_prefix

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"}

    def target_host(self, config: TenantConfig) -> str:
        return VERCEL_CNAME_TARGET

    async def deploy(
        self, app_path: Path, config: TenantConfig, tenant_id: UUID
    ) -> DeploymentResult:
        project_name = f"{self.project_prefix}-{config.subdomain}"
        files = await asyncio.to_thread(inline_files, app_path)
        env = {
            "NEXT_PUBLIC_TENANT_ID": str(tenant_id),
            "NEXT_PUBLIC_SUBDOMAIN": config.subdomain,
            "NEXT_PUBLIC_BLOG_NAME": config.blog_name,
        }

        response = await self._request(
            "POST",
            "/v10/projects",
            json={
                "name": project_name,
                "framework": "nextjs",
                "environmentVariables": [
                    {"key": key, "value": value, "target": ["production"], "type": "plain"}
                    for key, value in env.items()
                ],
            },
        )
        project = response.json()

        logger.info(f"Uploading {len(files)} files from {app_path} to Vercel")
        response = await self._request(
            "POST",
            "/v13/deployments",
            json={
                "name": project_name,
                "project": project["id"],
                "target": "production",
                "files": files,
                "projectSettings": {"framework": "nextjs"},
            },
        )
        deployment = response.json()
        logger.info(f"Vercel deployment {deployment.get('id')} created for {project_name}")

        url = deployment["url"]
        return DeploymentResult(
            url=url if url.startswith("http") else f"https://{url}",
            provider=self.name,
            provider_id=project["id"],
            status=deployment.get("readyState"),
        )
