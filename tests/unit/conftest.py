import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.repositories.in_memory_job_store import InMemoryJobStore
from src.domain.entities import Tenant, TenantConfig, TenantStatus


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def uow_factory(mock_uow):
    """Every step-level unit of work resolves to the same mock"""
    return lambda: mock_uow


@pytest.fixture
def job_store():
    return InMemoryJobStore()


@pytest.fixture
def tenant_config():
    return TenantConfig(blog_name="Acme Blog", subdomain="acme", owner_email="a@acme.com")


@pytest.fixture
def tenant():
    return Tenant(
        name="Acme Blog",
        slug="acme",
        subdomain="acme",
        owner_email="a@acme.com",
        status=TenantStatus.provisioning,
    )
