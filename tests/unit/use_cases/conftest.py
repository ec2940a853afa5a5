import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.repositories.in_memory_job_store import InMemoryJobStore


@pytest.fixture
def orchestrator():
    """Orchestrator double: records submissions, runs nothing"""
    orchestrator = MagicMock()
    orchestrator.job_store = InMemoryJobStore()
    orchestrator.settings.estimated_time = "5-10 minutes"
    orchestrator.settings.platform_domain = "blogs.example.com"
    orchestrator.is_subdomain_in_flight = MagicMock(return_value=False)
    orchestrator.submit = AsyncMock(return_value=MagicMock(job_id="job_1"))
    orchestrator.submit_redeploy = AsyncMock(return_value=MagicMock(job_id="job_2"))
    return orchestrator


@pytest.fixture
def tenants_uow(mock_uow):
    """Unit of work with no tenants at all"""
    mock_uow.tenants.get_by_subdomain = AsyncMock(return_value=None)
    mock_uow.tenants.get_by_custom_domain = AsyncMock(return_value=None)
    mock_uow.tenants.get_by_id = AsyncMock(return_value=None)
    mock_uow.tenants.update = AsyncMock(side_effect=lambda t: t)
    mock_uow.audit_events.create = AsyncMock()
    return mock_uow
