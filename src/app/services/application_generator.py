from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

from src.domain.entities import Template


class IApplicationGenerator(ABC):
    """Materializes a tenant-specific application instance from a template"""

    @abstractmethod
    async def generate(self, template: Template, variables: Dict[str, str]) -> Path:
        """
        Copy the template to the tenant's destination and substitute variables.

        Re-running for the same subdomain overwrites the previous instance.
        Raises GenerationIO on copy/write failure.
        """
        pass
