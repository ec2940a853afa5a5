"""Admin use cases for tenant lifecycle operations."""

from .deactivate_tenant_use_case import DeactivateTenantUseCase
from .get_tenant_deployment_use_case import GetTenantDeploymentUseCase
from .redeploy_tenant_use_case import RedeployTenantUseCase
from .verify_domain_use_case import VerifyDomainUseCase

__all__ = [
    "RedeployTenantUseCase",
    "DeactivateTenantUseCase",
    "GetTenantDeploymentUseCase",
    "VerifyDomainUseCase",
]
