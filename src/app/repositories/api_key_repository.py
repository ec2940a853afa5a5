from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import ApiKey


class IApiKeyRepository(ABC):
    """ApiKey repository interface - application layer"""

    @abstractmethod
    async def create(self, api_key: ApiKey) -> ApiKey:
        """Store a new (hashed) API key"""
        pass

    @abstractmethod
    async def list_by_tenant(self, tenant_id: UUID) -> List[ApiKey]:
        """All API keys issued to a tenant"""
        pass
