from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    DeploymentResult,
    DomainConfig,
    FinalizationResult,
    TenantConfig,
)

# Returns a fresh UnitOfWork that owns its own database session. Pipeline
# steps outlive the HTTP request, so they never share the request's session.
UnitOfWorkFactory = Callable[[], UnitOfWork]


@dataclass
class StepContext:
    """Mutable state handed from one pipeline step to the next"""

    config: TenantConfig
    template_name: str
    job_id: Optional[str] = None

    tenant_id: Optional[UUID] = None
    owner_user_id: Optional[UUID] = None
    app_path: Optional[Path] = None
    domain_config: Optional[DomainConfig] = None
    deployment: Optional[DeploymentResult] = None
    finalization: Optional[FinalizationResult] = None
    warnings: List[str] = field(default_factory=list)

    def job_fields(self) -> Dict[str, Any]:
        """Step results worth exposing on the job record"""
        fields: Dict[str, Any] = {}
        if self.tenant_id is not None:
            fields["tenant_id"] = self.tenant_id
        if self.app_path is not None:
            fields["app_path"] = str(self.app_path)
        if self.deployment is not None:
            fields["deployment_url"] = self.deployment.url
        if self.finalization is not None:
            fields["api_key"] = self.finalization.api_key
        return fields
