from abc import abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from src.app.services.provider import IProvider


class WelcomeEmail(BaseModel):
    to: str
    subject: str
    data: Dict[str, Any] = Field(default_factory=dict)


class IEmailProvider(IProvider):
    """Email provider interface - sends templated transactional mail"""

    @abstractmethod
    async def send_welcome(self, email: WelcomeEmail) -> Optional[str]:
        """Send the welcome template. Returns the provider message id."""
        pass
