from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.api_key_repository import IApiKeyRepository
from src.domain.entities import ApiKey


class ApiKeyRepository(IApiKeyRepository):
    """ApiKey repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, api_key: ApiKey) -> ApiKey:
        """Store a new (hashed) API key"""
        self.session.add(api_key)
        await self.session.flush()
        await self.session.refresh(api_key)
        return api_key

    async def list_by_tenant(self, tenant_id: UUID) -> List[ApiKey]:
        """All API keys issued to a tenant"""
        stmt = (
            select(ApiKey)
            .where(ApiKey.tenant_id == tenant_id)
            .order_by(ApiKey.created_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())
