from typing import List

from src.app.services.template_registry import ITemplateRegistry
from src.domain.entities import TemplateDescriptor
from src.libs.result import Result, Return


class ListTemplatesUseCase:
    def __init__(self, template_registry: ITemplateRegistry):
        self.template_registry = template_registry

    async def execute(self) -> Result[List[TemplateDescriptor]]:
        return Return.ok(self.template_registry.list_templates())
