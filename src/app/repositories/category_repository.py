from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import Category


class ICategoryRepository(ABC):
    """Category repository interface - application layer"""

    @abstractmethod
    async def list_by_tenant(self, tenant_id: UUID) -> List[Category]:
        """All categories of a tenant"""
        pass

    @abstractmethod
    async def create(self, category: Category) -> Category:
        """Create a new category"""
        pass
