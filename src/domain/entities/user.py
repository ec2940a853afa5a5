"""
User Entity

Owner/staff account belonging to a single tenant.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - account inside one tenant.

    Business Rules:
    - (tenant_id, email) is unique
    - Provisioning creates exactly one admin user, the tenant owner
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    email: str = Field(index=True, max_length=255)
    name: str = Field(default="Admin", max_length=255)

    role: UserRole = Field(default=UserRole.admin)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_tenant_email", "tenant_id", "email", unique=True),
    )
