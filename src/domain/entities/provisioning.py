"""
Provisioning Value Objects

Inputs and per-step results passed between provisioning steps.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .enums import DomainKind, VerificationStatus

DEFAULT_THEME = "modern"
DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_NICHE = "general"


class TenantConfig(BaseModel):
    """
    Snapshot of a provisioning request.

    Stored on the job and handed to every step; never mutated after the job
    is created.
    """

    blog_name: str
    subdomain: str
    owner_email: str
    custom_domain: Optional[str] = None
    owner_name: Optional[str] = None
    company_name: Optional[str] = None
    theme: str = DEFAULT_THEME
    primary_color: str = DEFAULT_PRIMARY_COLOR
    niche: str = DEFAULT_NICHE
    template_name: Optional[str] = None


class DomainState(BaseModel):
    """One domain attached to a tenant and its verification state"""

    name: str
    kind: DomainKind
    active: bool
    verification: VerificationStatus = VerificationStatus.unknown
    record_id: Optional[str] = None


class DomainConfig(BaseModel):
    """Result of the configure-domain step"""

    domains: List[DomainState] = Field(default_factory=list)
    target_host: Optional[str] = None

    @property
    def primary(self) -> DomainState:
        for domain in self.domains:
            if domain.kind == DomainKind.custom:
                return domain
        return self.domains[0]


class DeploymentResult(BaseModel):
    """Result of the deploy step"""

    url: str
    provider: str
    provider_id: Optional[str] = None
    status: Optional[str] = None
    deployed_at: Optional[datetime] = None


class FinalizationResult(BaseModel):
    """Result of the finalize step"""

    api_key: str
    api_key_id: UUID
    notification_sent: bool = False
    warnings: List[str] = Field(default_factory=list)
