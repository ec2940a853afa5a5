"""
Provisioning Domain Enums

All enumeration types used across domain entities and provisioning jobs.
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status"""

    provisioning = "provisioning"
    active = "active"
    inactive = "inactive"


class UserRole(str, Enum):
    """Role of a user inside their tenant"""

    admin = "admin"
    editor = "editor"
    author = "author"


class JobStatus(str, Enum):
    """Provisioning job status"""

    initializing = "initializing"
    running = "running"
    completed = "completed"
    failed = "failed"


class JobKind(str, Enum):
    """Which pipeline a job runs"""

    provision = "provision"
    redeploy = "redeploy"
    resume = "resume"


class DomainKind(str, Enum):
    """Kind of domain attached to a tenant"""

    subdomain = "subdomain"
    custom = "custom"


class VerificationStatus(str, Enum):
    """Certificate / ownership verification state of a domain"""

    active = "active"
    pending = "pending"
    unknown = "unknown"
