from abc import ABC, abstractmethod

from src.app.repositories.api_key_repository import IApiKeyRepository
from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.category_repository import ICategoryRepository
from src.app.repositories.tag_repository import ITagRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository
    users: IUserRepository
    categories: ICategoryRepository
    tags: ITagRepository
    api_keys: IApiKeyRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
