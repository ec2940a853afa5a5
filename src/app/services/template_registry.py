from abc import ABC, abstractmethod
from typing import List

from src.domain.entities import Template, TemplateDescriptor


class ITemplateRegistry(ABC):
    """Template registry interface - read-only after loading"""

    @abstractmethod
    def list_templates(self) -> List[TemplateDescriptor]:
        """Descriptors of every loaded template, sorted by name"""
        pass

    @abstractmethod
    def get_template(self, name: str) -> Template:
        """Loaded template by name; raises TemplateNotFound"""
        pass
