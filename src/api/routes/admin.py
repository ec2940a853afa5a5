"""
Admin API Routes - Operator Endpoints

Authentication is via Admin API Key.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import (
    DeactivateTenantUseCase,
    GetTenantDeploymentUseCase,
    RedeployTenantUseCase,
    VerifyDomainUseCase,
)
from src.app.use_cases.deployment import CleanupJobsResponse, CleanupJobsUseCase
from src.app.use_cases.deployment.dtos import (
    DeactivateTenantResponse,
    ProvisionJobResponse,
    RedeployTenantCommand,
    TenantDeploymentResponse,
    VerifyDomainCommand,
    VerifyDomainResponse,
)
from src.depends import get_orchestrator, get_unit_of_work

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_api_key)]
)


@router.post(
    "/deployments/cleanup",
    status_code=status.HTTP_200_OK,
    response_model=CleanupJobsResponse,
)
async def cleanup_deployments(
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    """Drop finished jobs older than the retention window"""
    result = await CleanupJobsUseCase(orchestrator).execute()
    return result.value


@router.get(
    "/tenants/{tenant_id}/deployment",
    status_code=status.HTTP_200_OK,
    response_model=TenantDeploymentResponse,
)
async def get_tenant_deployment(
    tenant_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Tenant Deployment

    Current deployment URL, provider and domain state of a tenant.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await GetTenantDeploymentUseCase(uow).execute(tenant_id)

    if result.is_err():
        raise_for_error(result.error, {"TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND})

    return result.value


@router.post(
    "/tenants/{tenant_id}/redeploy",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ProvisionJobResponse,
)
async def redeploy_tenant(
    tenant_id: UUID,
    command: Optional[RedeployTenantCommand] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    """
    Redeploy Tenant

    Regenerates and redeploys the tenant's application, optionally from a
    different template. Reactivates an inactive tenant, and finishes
    provisioning for a tenant whose first run failed.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: DEPLOYMENT_IN_PROGRESS
    """
    result = await RedeployTenantUseCase(uow, orchestrator).execute(
        tenant_id, command or RedeployTenantCommand()
    )

    if result.is_err():
        raise_for_error(
            result.error,
            {
                "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
                "DEPLOYMENT_IN_PROGRESS": status.HTTP_409_CONFLICT,
            },
        )

    return result.value


@router.post(
    "/tenants/{tenant_id}/deactivate",
    status_code=status.HTTP_200_OK,
    response_model=DeactivateTenantResponse,
)
async def deactivate_tenant(
    tenant_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Deactivate Tenant

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await DeactivateTenantUseCase(uow).execute(tenant_id)

    if result.is_err():
        raise_for_error(result.error, {"TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND})

    return result.value


@router.post(
    "/domains/verify",
    status_code=status.HTTP_200_OK,
    response_model=VerifyDomainResponse,
)
async def verify_domain(
    command: VerifyDomainCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Domain Verification Webhook

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: DOMAIN_MISMATCH
    """
    result = await VerifyDomainUseCase(uow).execute(command)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
                "DOMAIN_MISMATCH": status.HTTP_409_CONFLICT,
            },
        )

    return result.value
