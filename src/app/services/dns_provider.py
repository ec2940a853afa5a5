from abc import abstractmethod
from typing import Optional

from pydantic import BaseModel

from src.app.services.provider import IProvider
from src.domain.entities import VerificationStatus


class DnsRecord(BaseModel):
    id: str
    type: str
    name: str
    content: str


class IDnsProvider(IProvider):
    """DNS provider interface - manages custom-domain records"""

    @abstractmethod
    async def find_record(self, name: str) -> Optional[DnsRecord]:
        """Existing record for a hostname, if any"""
        pass

    @abstractmethod
    async def create_cname(self, name: str, target: str) -> DnsRecord:
        """Create a CNAME record name -> target"""
        pass

    @abstractmethod
    async def certificate_status(self, hostname: str) -> VerificationStatus:
        """SSL certificate state for a hostname"""
        pass
