from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.category_repository import ICategoryRepository
from src.domain.entities import Category


class CategoryRepository(ICategoryRepository):
    """Category repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_tenant(self, tenant_id: UUID) -> List[Category]:
        stmt = select(Category).where(Category.tenant_id == tenant_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, category: Category) -> Category:
        self.session.add(category)
        await self.session.flush()
        await self.session.refresh(category)
        return category
