"""
Deployment Use Case DTOs (Data Transfer Objects)

Command and Response classes for the provisioning API.
Requests accept camelCase or snake_case; responses serialize camelCase.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.domain.entities import JobKind, JobStatus, ProvisioningJob, TenantConfig
from src.domain.entities.provisioning import (
    DEFAULT_NICHE,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_THEME,
)

MAX_BULK_TENANTS = 10


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Command DTOs
# ============================================================================


class ProvisionTenantCommand(CamelModel):
    """Provisioning request for one tenant"""

    blog_name: str = Field(..., min_length=1, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=63)
    owner_email: EmailStr
    custom_domain: Optional[str] = Field(None, max_length=253)
    owner_name: Optional[str] = Field(None, max_length=255)
    company_name: Optional[str] = Field(None, max_length=255)
    theme: str = Field(DEFAULT_THEME, max_length=50)
    primary_color: str = DEFAULT_PRIMARY_COLOR
    niche: str = Field(DEFAULT_NICHE, max_length=100)
    template_name: Optional[str] = Field(None, max_length=100)

    def to_config(self) -> TenantConfig:
        custom_domain = (self.custom_domain or "").strip().lower().rstrip(".")
        return TenantConfig(
            blog_name=self.blog_name.strip(),
            subdomain=self.subdomain.strip().lower(),
            owner_email=str(self.owner_email).lower(),
            custom_domain=custom_domain or None,
            owner_name=self.owner_name,
            company_name=self.company_name,
            theme=self.theme,
            primary_color=self.primary_color,
            niche=self.niche,
            template_name=self.template_name,
        )


class BulkProvisionCommand(CamelModel):
    tenants: List[ProvisionTenantCommand] = Field(..., min_length=1)


class RedeployTenantCommand(CamelModel):
    template_name: Optional[str] = Field(None, max_length=100)


class VerifyDomainCommand(CamelModel):
    """Domain verification webhook payload"""

    domain: str = Field(..., min_length=1, max_length=253)
    status: str = Field(..., description="verified | pending | failed")
    tenant_id: Optional[UUID] = None


# ============================================================================
# Response DTOs
# ============================================================================


class ProvisionJobResponse(CamelModel):
    """Accepted provisioning (or redeploy) job"""

    job_id: str
    status: JobStatus
    estimated_time: str
    message: str = "Tenant provisioning started"
    tenant_id: Optional[UUID] = None


class JobStepView(CamelModel):
    message: str
    timestamp: datetime


class JobStatusResponse(CamelModel):
    """Full job snapshot, as polled by the client"""

    job_id: str
    kind: JobKind
    status: JobStatus
    progress: int
    steps: List[JobStepView]
    error: Optional[str] = None
    failure_reason: Optional[str] = None
    failed_step: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    tenant_id: Optional[UUID] = None
    subdomain: Optional[str] = None
    deployment_url: Optional[str] = None
    api_key: Optional[str] = None
    started_at: datetime
    updated_at: datetime
    finished_at: Optional[datetime] = None

    @classmethod
    def from_job(cls, job: ProvisioningJob) -> "JobStatusResponse":
        return cls(
            job_id=job.job_id,
            kind=job.kind,
            status=job.status,
            progress=job.progress,
            steps=[JobStepView(message=s.message, timestamp=s.timestamp) for s in job.steps],
            error=job.error,
            failure_reason=job.failure_reason,
            failed_step=job.failed_step,
            warnings=list(job.warnings),
            tenant_id=job.tenant_id,
            subdomain=job.request.get("subdomain"),
            deployment_url=job.deployment_url,
            api_key=job.api_key,
            started_at=job.started_at,
            updated_at=job.updated_at,
            finished_at=job.finished_at,
        )


class JobSummary(CamelModel):
    """Job listing entry (never carries the credential)"""

    job_id: str
    kind: JobKind
    status: JobStatus
    progress: int
    subdomain: Optional[str] = None
    tenant_id: Optional[UUID] = None
    error: Optional[str] = None
    failure_reason: Optional[str] = None
    started_at: datetime
    updated_at: datetime

    @classmethod
    def from_job(cls, job: ProvisioningJob) -> "JobSummary":
        return cls(
            job_id=job.job_id,
            kind=job.kind,
            status=job.status,
            progress=job.progress,
            subdomain=job.request.get("subdomain"),
            tenant_id=job.tenant_id,
            error=job.error,
            failure_reason=job.failure_reason,
            started_at=job.started_at,
            updated_at=job.updated_at,
        )


class JobListResponse(CamelModel):
    jobs: List[JobSummary]
    total: int


class CancelJobResponse(CamelModel):
    job_id: str
    status: JobStatus
    failure_reason: Optional[str] = None
    progress: int


class CleanupJobsResponse(CamelModel):
    removed: int
    remaining: int
    message: str = "Deployment cleanup completed"


class SubdomainAvailabilityResponse(CamelModel):
    subdomain: str
    available: bool
    reason: Optional[str] = None


class BulkProvisionItem(CamelModel):
    subdomain: str
    accepted: bool
    job_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class BulkProvisionResponse(CamelModel):
    results: List[BulkProvisionItem]
    accepted: int
    rejected: int
    message: str


class DeactivateTenantResponse(CamelModel):
    tenant_id: UUID
    status: str
    deactivated_at: Optional[datetime] = None


class VerifyDomainResponse(CamelModel):
    tenant_id: UUID
    domain: str
    domain_verified: bool


class TenantDeploymentResponse(CamelModel):
    """Deployment, domain and provider state of one tenant"""

    tenant_id: UUID
    subdomain: str
    status: str
    template_name: Optional[str] = None
    custom_domain: Optional[str] = None
    requested_custom_domain: Optional[str] = None
    domain_configured: bool
    domain_verified: bool
    domain_verified_at: Optional[datetime] = None
    deployment_url: Optional[str] = None
    deployment_provider: Optional[str] = None
    deployment_provider_id: Optional[str] = None
    deployed_at: Optional[datetime] = None
    provisioned_at: Optional[datetime] = None

    @classmethod
    def from_tenant(cls, tenant) -> "TenantDeploymentResponse":
        return cls(
            tenant_id=tenant.id,
            subdomain=tenant.subdomain,
            status=tenant.status.value,
            template_name=tenant.template_name,
            custom_domain=tenant.custom_domain,
            requested_custom_domain=tenant.requested_custom_domain,
            domain_configured=tenant.domain_configured,
            domain_verified=tenant.domain_verified,
            domain_verified_at=tenant.domain_verified_at,
            deployment_url=tenant.deployment_url,
            deployment_provider=tenant.deployment_provider,
            deployment_provider_id=tenant.deployment_provider_id,
            deployed_at=tenant.deployed_at,
            provisioned_at=tenant.provisioned_at,
        )
