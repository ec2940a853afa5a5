"""Provisioning use cases: submit, track and manage provisioning jobs."""

from .bulk_provision_use_case import BulkProvisionUseCase
from .cancel_job_use_case import CancelJobUseCase
from .check_subdomain_use_case import CheckSubdomainUseCase
from .cleanup_jobs_use_case import CleanupJobsUseCase
from .dtos import (
    BulkProvisionCommand,
    BulkProvisionResponse,
    CancelJobResponse,
    CleanupJobsResponse,
    JobListResponse,
    JobStatusResponse,
    ProvisionJobResponse,
    ProvisionTenantCommand,
    SubdomainAvailabilityResponse,
)
from .get_job_status_use_case import GetJobStatusUseCase
from .list_jobs_use_case import ListJobsUseCase
from .list_templates_use_case import ListTemplatesUseCase
from .provision_tenant_use_case import ProvisionTenantUseCase

__all__ = [
    "ProvisionTenantUseCase",
    "ProvisionTenantCommand",
    "ProvisionJobResponse",
    "BulkProvisionUseCase",
    "BulkProvisionCommand",
    "BulkProvisionResponse",
    "GetJobStatusUseCase",
    "JobStatusResponse",
    "ListJobsUseCase",
    "JobListResponse",
    "CancelJobUseCase",
    "CancelJobResponse",
    "CleanupJobsUseCase",
    "CleanupJobsResponse",
    "ListTemplatesUseCase",
    "CheckSubdomainUseCase",
    "SubdomainAvailabilityResponse",
]
