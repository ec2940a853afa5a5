"""
Provisioning Domain Entities

Table entities (tenant datastore) and the volatile provisioning models.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    DomainKind,
    JobKind,
    JobStatus,
    TenantStatus,
    UserRole,
    VerificationStatus,
)

# Export table entities
from .tenant import Tenant
from .user import User
from .category import Category
from .tag import Tag
from .api_key import ApiKey
from .audit_event import AuditEvent

# Export provisioning models
from .provisioning_job import JobStep, ProvisioningJob
from .template import Template, TemplateDescriptor, TemplateVariable
from .provisioning import (
    DeploymentResult,
    DomainConfig,
    DomainState,
    FinalizationResult,
    TenantConfig,
)

__all__ = [
    # Enums
    "DomainKind",
    "JobKind",
    "JobStatus",
    "TenantStatus",
    "UserRole",
    "VerificationStatus",
    # Entities
    "Tenant",
    "User",
    "Category",
    "Tag",
    "ApiKey",
    "AuditEvent",
    # Provisioning
    "JobStep",
    "ProvisioningJob",
    "Template",
    "TemplateDescriptor",
    "TemplateVariable",
    "DeploymentResult",
    "DomainConfig",
    "DomainState",
    "FinalizationResult",
    "TenantConfig",
]
