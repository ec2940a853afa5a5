"""
Tenant Entity

Represents one customer's blog within the platform.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import TenantStatus


class Tenant(SQLModel, table=True):
    """
    Tenant entity - one customer's isolated blog.

    Business Rules:
    - Subdomain is unique across all tenants
    - Custom domain is unique when set
    - Created in `provisioning`; the finalize step flips it to `active`
    - Never deleted by provisioning; deactivation is an admin operation
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(max_length=63)
    subdomain: str = Field(unique=True, index=True, max_length=63)
    custom_domain: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=253
    )
    # What the provision request asked for; custom_domain is set once claimed
    requested_custom_domain: Optional[str] = Field(default=None, max_length=253)
    owner_email: str = Field(max_length=255)

    status: TenantStatus = Field(default=TenantStatus.provisioning)

    # Template-derived settings
    theme: str = Field(default="modern", max_length=50)
    primary_color: str = Field(default="#3B82F6", max_length=7)
    niche: Optional[str] = Field(default=None, max_length=100)
    company_name: Optional[str] = Field(default=None, max_length=255)
    template_name: Optional[str] = Field(default=None, max_length=100)

    # Domain configuration
    domain_configured: bool = Field(default=False)
    domain_verified: bool = Field(default=False)
    domain_verified_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Deployment
    deployment_url: Optional[str] = Field(default=None, max_length=500)
    deployment_provider: Optional[str] = Field(default=None, max_length=50)
    deployment_provider_id: Optional[str] = Field(default=None, max_length=255)
    deployed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Lifecycle timestamps
    provisioned_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    deactivated_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_tenant_status", "status"),)
