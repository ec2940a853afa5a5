from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.tag_repository import ITagRepository
from src.domain.entities import Tag


class TagRepository(ITagRepository):
    """Tag repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_tenant(self, tenant_id: UUID) -> List[Tag]:
        stmt = select(Tag).where(Tag.tenant_id == tenant_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, tag: Tag) -> Tag:
        self.session.add(tag)
        await self.session.flush()
        await self.session.refresh(tag)
        return tag
