"""
Tag Entity

Article tag, seeded with defaults when a tenant is provisioned.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class Tag(SQLModel, table=True):
    __tablename__ = "tags"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=100)
    color: str = Field(default="#3B82F6", max_length=7)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_tag_tenant_slug", "tenant_id", "slug", unique=True),)
