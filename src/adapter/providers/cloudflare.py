import logging
from typing import Optional

import httpx

from src.adapter.providers.http import HttpProvider
from src.app.services.dns_provider import DnsRecord, IDnsProvider
from src.domain.entities import VerificationStatus

logger = logging.getLogger(__name__)


class CloudflareError(Exception):
    pass


class CloudflareDnsProvider(HttpProvider, IDnsProvider):
    """Manages custom-domain CNAME records in one Cloudflare zone"""

    name = "cloudflare"
    base_url = "https://api.cloudflare.com/client/v4"

    def __init__(
        self,
        token: Optional[str],
        zone_id: Optional[str],
        proxied: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.token = token
        self.zone_id = zone_id
        self.proxied = proxied

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.zone_id)

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"}

    async def _result(self, method: str, path: str, **kwargs):
        response = await self._request(method, f"/zones/{self.zone_id}{path}", **kwargs)
        body = response.json()
        if not body.get("success", False):
            messages = "; ".join(e.get("message", "") for e in body.get("errors", []))
            raise CloudflareError(messages or "Cloudflare API request failed")
        return body.get("result")

    async def find_record(self, name: str) -> Optional[DnsRecord]:
        records = await self._result("GET", "/dns_records", params={"name": name})
        if not records:
            return None
        record = records[0]
        return DnsRecord(
            id=record["id"], type=record["type"], name=record["name"], content=record["content"]
        )

    async def create_cname(self, name: str, target: str) -> DnsRecord:
        record = await self._result(
            "POST",
            "/dns_records",
            json={
                "type": "CNAME",
                "name": name,
                "content": target,
                "ttl": 1,
                "proxied": self.proxied,
            },
        )
        logger.info(f"Cloudflare CNAME {name} -> {target} created ({record['id']})")
        return DnsRecord(id=record["id"], type="CNAME", name=name, content=target)

    async def certificate_status(self, hostname: str) -> VerificationStatus:
        entries = await self._result("GET", "/ssl/verification") or []
        for entry in entries:
            if entry.get("hostname") == hostname:
                if entry.get("certificate_status") == "active" or entry.get("status") == "active":
                    return VerificationStatus.active
                return VerificationStatus.pending
        return VerificationStatus.unknown
