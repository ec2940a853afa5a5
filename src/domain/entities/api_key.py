"""
ApiKey Entity

Scoped API credential issued to a tenant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class ApiKey(SQLModel, table=True):
    """
    ApiKey entity - credential scoped to a single tenant.

    Business Rules:
    - Plaintext key is shown once; only the bcrypt hash is stored
    - key_prefix (first 8 chars) identifies the key in listings
    """

    __tablename__ = "api_keys"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    name: str = Field(default="Default API Key", max_length=100)

    key_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    key_prefix: str = Field(max_length=8)

    permissions: list = Field(
        default_factory=lambda: ["read", "write"], sa_column=Column(JSON)
    )
    rate_limit: int = Field(default=1000)
    is_active: bool = Field(default=True)
    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_api_key_prefix", "key_prefix"),)
