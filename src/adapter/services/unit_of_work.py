from typing import Callable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.api_key_repository import ApiKeyRepository
from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.category_repository import CategoryRepository
from src.adapter.repositories.tag_repository import TagRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self._bind(self.session)
        return self

    async def __aexit__(self, *args):
        # Entities read inside the block stay readable after it ends.
        self.session.expunge_all()
        await self.rollback()

    def _bind(self, session: AsyncSession) -> None:
        # Initialize all repositories with the session
        self.tenants = TenantRepository(session)
        self.users = UserRepository(session)
        self.categories = CategoryRepository(session)
        self.tags = TagRepository(session)
        self.api_keys = ApiKeyRepository(session)
        self.audit_events = AuditEventRepository(session)

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class SessionScopedUnitOfWork(SqlAlchemyUnitOfWork):
    """
    UnitOfWork that opens its own session on enter and closes it on exit.

    Used by background pipeline steps, which outlive the request session.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self):
        self.session = self.session_factory()
        self._bind(self.session)
        return self

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            await self.session.close()
            self.session = None
