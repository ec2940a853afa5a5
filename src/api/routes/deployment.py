"""
Deployment API Routes

Tenant provisioning, job tracking and template discovery.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.repositories.job_store import IJobStore
from src.app.services.template_registry import ITemplateRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.deployment import (
    BulkProvisionCommand,
    BulkProvisionResponse,
    BulkProvisionUseCase,
    CancelJobResponse,
    CancelJobUseCase,
    CheckSubdomainUseCase,
    GetJobStatusUseCase,
    JobListResponse,
    JobStatusResponse,
    ListJobsUseCase,
    ListTemplatesUseCase,
    ProvisionJobResponse,
    ProvisionTenantCommand,
    ProvisionTenantUseCase,
    SubdomainAvailabilityResponse,
)
from src.depends import (
    get_job_store,
    get_orchestrator,
    get_template_registry,
    get_unit_of_work,
)
from src.domain.entities import JobStatus, TemplateDescriptor

router = APIRouter(prefix="/deployment", tags=["Deployment"])


@router.get(
    "/templates",
    status_code=status.HTTP_200_OK,
    response_model=List[TemplateDescriptor],
)
async def list_templates(
    template_registry: ITemplateRegistry = Depends(get_template_registry),
):
    """List available application templates and their variables"""
    result = await ListTemplatesUseCase(template_registry).execute()
    return result.value


@router.post(
    "/provision",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ProvisionJobResponse,
)
async def provision_tenant(
    command: ProvisionTenantCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    """
    Provision Tenant

    Creates a provisioning job and returns immediately; poll
    GET /deployment/status/{jobId} for progress.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 409 Conflict: SUBDOMAIN_EXISTS, DOMAIN_EXISTS
        - 422 Unprocessable Entity: malformed body
    """
    result = await ProvisionTenantUseCase(uow, orchestrator).execute(command)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
                "SUBDOMAIN_EXISTS": status.HTTP_409_CONFLICT,
                "DOMAIN_EXISTS": status.HTTP_409_CONFLICT,
            },
        )

    return result.value


@router.get(
    "/status/{job_id}",
    status_code=status.HTTP_200_OK,
    response_model=JobStatusResponse,
)
async def get_job_status(job_id: str, job_store: IJobStore = Depends(get_job_store)):
    """
    Job Status

    Raises:
        - 404 Not Found: JOB_NOT_FOUND
    """
    result = await GetJobStatusUseCase(job_store).execute(job_id)

    if result.is_err():
        raise_for_error(result.error, {"JOB_NOT_FOUND": status.HTTP_404_NOT_FOUND})

    return result.value


@router.get(
    "/check-availability/{subdomain}",
    status_code=status.HTTP_200_OK,
    response_model=SubdomainAvailabilityResponse,
)
async def check_availability(
    subdomain: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    """
    Subdomain Availability

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
    """
    result = await CheckSubdomainUseCase(uow, orchestrator).execute(subdomain)

    if result.is_err():
        raise_for_error(result.error, {"VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST})

    return result.value


@router.get(
    "/jobs",
    status_code=status.HTTP_200_OK,
    response_model=JobListResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def list_jobs(
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    job_store: IJobStore = Depends(get_job_store),
):
    """
    List Jobs

    Requires: X-Admin-API-Key header
    """
    result = await ListJobsUseCase(job_store).execute(status_filter)
    return result.value


@router.post(
    "/jobs/{job_id}/cancel",
    status_code=status.HTTP_200_OK,
    response_model=CancelJobResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def cancel_job(
    job_id: str,
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    """
    Cancel Job

    Stops the job's pipeline; completed steps are not rolled back.

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: JOB_NOT_FOUND
        - 409 Conflict: JOB_ALREADY_FINISHED, JOB_NOT_RUNNING
    """
    result = await CancelJobUseCase(orchestrator).execute(job_id)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                "JOB_NOT_FOUND": status.HTTP_404_NOT_FOUND,
                "JOB_ALREADY_FINISHED": status.HTTP_409_CONFLICT,
                "JOB_NOT_RUNNING": status.HTTP_409_CONFLICT,
            },
        )

    return result.value


@router.post(
    "/bulk-provision",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=BulkProvisionResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def bulk_provision(
    command: BulkProvisionCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    """
    Bulk Provision

    Requires: X-Admin-API-Key header

    Raises:
        - 400 Bad Request: TOO_MANY_TENANTS
    """
    result = await BulkProvisionUseCase(uow, orchestrator).execute(command)

    if result.is_err():
        raise_for_error(result.error, {"TOO_MANY_TENANTS": status.HTTP_400_BAD_REQUEST})

    return result.value
