from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401  registers the tables
from config import ApplicationConfig
from src.adapter.repositories.in_memory_job_store import InMemoryJobStore
from src.adapter.services.template_registry import FilesystemTemplateRegistry
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    build_orchestrator,
    get_job_store,
    get_orchestrator,
    get_template_registry,
    get_unit_of_work,
)
from tests.fixtures.json_loader import TestDataLoader
from tests.fixtures.providers import FakeDnsProvider, FakeEmailProvider, FakeHostingProvider

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
ADMIN_HEADERS = {"X-Admin-API-Key": "test-admin-key-12345"}


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def hosting():
    return FakeHostingProvider()


@pytest.fixture
def dns():
    return FakeDnsProvider()


@pytest.fixture
def email():
    return FakeEmailProvider()


@pytest.fixture
def test_config(tmp_path):
    class TestConfig(ApplicationConfig):
        DEPLOYMENTS_DIR = str(tmp_path / "deployments")
        TEMPLATES_DIR = str(TEMPLATES_DIR)
        STEP_TIMEOUT_SECONDS = 30

    return TestConfig


@pytest.fixture
def template_registry(test_config):
    return FilesystemTemplateRegistry(Path(test_config.TEMPLATES_DIR))


@pytest_asyncio.fixture
async def orchestrator(test_config, template_registry, session_factory, hosting, dns, email):
    orchestrator = build_orchestrator(
        InMemoryJobStore(),
        template_registry,
        config=test_config,
        session_factory=session_factory,
        hosting_providers=[hosting],
        dns_providers=[dns],
        email_providers=[email],
    )
    yield orchestrator
    await orchestrator.shutdown()


@pytest_asyncio.fixture
async def client(test_config, template_registry, session_factory, orchestrator):
    from src.api.app import create_app

    app = create_app(test_config)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_job_store] = lambda: orchestrator.job_store
    app.dependency_overrides[get_template_registry] = lambda: template_registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
