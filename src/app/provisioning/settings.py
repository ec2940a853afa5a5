from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(frozen=True)
class ProvisioningSettings:
    default_template: str = "modern-blog"
    platform_domain: str = "blogs.example.com"
    api_base_url: str = "http://localhost:8000"
    credentials_endpoint: Optional[str] = None
    support_email: str = "support@blogs.example.com"
    estimated_time: str = "5-10 minutes"
    step_timeout: Optional[float] = 300.0
    job_retention: timedelta = timedelta(hours=24)
    sweep_interval: float = 3600.0

    @property
    def resolved_credentials_endpoint(self) -> str:
        return self.credentials_endpoint or f"{self.api_base_url.rstrip('/')}/api-keys"
