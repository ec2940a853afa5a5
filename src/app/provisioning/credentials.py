import secrets
from typing import Optional, Tuple
from uuid import UUID

import bcrypt

from src.domain.entities import ApiKey

API_KEY_PREFIX = "fb_"
API_KEY_PERMISSIONS = ["read", "write"]
API_KEY_RATE_LIMIT = 1000


def generate_api_key() -> str:
    """Random key: prefix + 64 hex chars (fits bcrypt's 72-byte limit)"""
    return f"{API_KEY_PREFIX}{secrets.token_hex(32)}"


def hash_api_key(api_key: str) -> str:
    return bcrypt.hashpw(api_key.encode("utf-8"), bcrypt.gensalt(12)).decode("utf-8")


def verify_api_key(api_key: str, key_hash: str) -> bool:
    return bcrypt.checkpw(api_key.encode("utf-8"), key_hash.encode("utf-8"))


def issue_api_key(
    tenant_id: UUID,
    created_by: Optional[UUID] = None,
    name: str = "Default API Key",
) -> Tuple[str, ApiKey]:
    """
    Mint a tenant-scoped API key.

    Returns the plaintext key (shown to the owner once) and the entity to
    persist, which only holds the hash and the 8-char prefix.
    """
    plaintext = generate_api_key()
    record = ApiKey(
        tenant_id=tenant_id,
        name=name,
        key_hash=hash_api_key(plaintext),
        key_prefix=plaintext[:8],
        permissions=list(API_KEY_PERMISSIONS),
        rate_limit=API_KEY_RATE_LIMIT,
        is_active=True,
        created_by=created_by,
    )
    return plaintext, record
