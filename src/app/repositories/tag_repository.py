from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import Tag


class ITagRepository(ABC):
    """Tag repository interface - application layer"""

    @abstractmethod
    async def list_by_tenant(self, tenant_id: UUID) -> List[Tag]:
        """All tags of a tenant"""
        pass

    @abstractmethod
    async def create(self, tag: Tag) -> Tag:
        """Create a new tag"""
        pass
