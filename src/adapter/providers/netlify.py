import asyncio
import logging
from pathlib import Path
from typing import Optional
from uuid import UUID

import httpx

from src.adapter.providers.bundle import zip_archive
from src.adapter.providers.http import HttpProvider
from src.app.services.hosting_provider import IHostingProvider
from src.domain.entities import DeploymentResult, TenantConfig

logger = logging.getLogger(__name__)


class NetlifyProvider(HttpProvider, IHostingProvider):
    """Creates a Netlify site per tenant and zip-deploys the generated instance to it"""

    name = "netlify"
    base_url = "https://api.netlify.com/api/v1"

    def __init__(
        self,
        token: Optional[str],
        site_prefix: str = "blog",
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.token = token
        self.site_prefix = site_prefix

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"}

    def site_name(self, config: TenantConfig) -> str:
        return f"{self.site_prefix}-{config.subdomain}"

    def target_host(self, config: TenantConfig) -> str:
        return f"{self.site_name(config)}.netlify.app"

    async def deploy(
        self, app_path: Path, config: TenantConfig, tenant_id: UUID
    ) -> DeploymentResult:
        payload = {
            "name": self.site_name(config),
            "build_settings": {
                "cmd": "npm run build",
                "dir": ".next",
                "env": {
                    "NEXT_PUBLIC_TENANT_ID": str(tenant_id),
                    "NEXT_PUBLIC_SUBDOMAIN": config.subdomain,
                    "NEXT_PUBLIC_BLOG_NAME": config.blog_name,
                },
            },
        }
        if config.custom_domain:
            payload["custom_domain"] = config.custom_domain

        archive = await asyncio.to_thread(zip_archive, app_path)

        response = await self._request("POST", "/sites", json=payload)
        site = response.json()
        logger.info(f"Netlify site {site.get('id')} created for {config.subdomain}")

        response = await self._request(
            "POST",
            f"/sites/{site['id']}/deploys",
            content=archive,
            headers={"Content-Type": "application/zip"},
        )
        deploy = response.json()
        logger.info(
            f"Netlify deploy {deploy.get('id')} uploaded ({len(archive)} bytes) for {config.subdomain}"
        )

        return DeploymentResult(
            url=site.get("ssl_url") or site["url"],
            provider=self.name,
            provider_id=site["id"],
            status=deploy.get("state"),
        )
