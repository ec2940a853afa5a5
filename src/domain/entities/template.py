"""
Template

Read-only blueprint (file tree + declared configuration variables) used to
generate a tenant's application instance.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class TemplateVariable(BaseModel):
    """Configuration variable a template expects"""

    name: str
    description: str = ""
    required: bool = False
    default: Optional[str] = None


class TemplateDescriptor(BaseModel):
    """Public view of a template, as returned by template listing"""

    name: str
    version: str = "1.0.0"
    description: str = ""
    variables: List[TemplateVariable] = Field(default_factory=list)


class Template(TemplateDescriptor):
    """
    Loaded template.

    config_files are paths (relative to the template root) whose
    `{{VARIABLE}}` placeholders are substituted at generation time.
    exclude holds glob patterns that are never copied.
    """

    path: Path
    config_files: List[str] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)

    def descriptor(self) -> TemplateDescriptor:
        return TemplateDescriptor(
            name=self.name,
            version=self.version,
            description=self.description,
            variables=self.variables,
        )

    def variable(self, name: str) -> Optional[TemplateVariable]:
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None
