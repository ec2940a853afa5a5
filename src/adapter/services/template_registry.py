import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from src.app.provisioning.errors import TemplateNotFound
from src.app.services.template_registry import ITemplateRegistry
from src.domain.entities import Template, TemplateDescriptor

logger = logging.getLogger(__name__)

# JSON is a subset of YAML, so both metadata files share one loader.
METADATA_FILES = ("template.yaml", "template.yml", "config.json")
DEFAULT_EXCLUDE = ["node_modules", ".git", ".next"]


class FilesystemTemplateRegistry(ITemplateRegistry):
    """
    Templates are the subdirectories of one root directory.

    Loaded once, lazily on first use; read-only afterwards. A template whose
    metadata is missing or unreadable is skipped with a warning.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self._templates: Optional[Dict[str, Template]] = None

    def list_templates(self) -> List[TemplateDescriptor]:
        templates = self._load()
        return [templates[name].descriptor() for name in sorted(templates)]

    def get_template(self, name: str) -> Template:
        template = self._load().get(name)
        if template is None:
            raise TemplateNotFound(name)
        return template

    def reload(self) -> int:
        self._templates = None
        return len(self._load())

    def _load(self) -> Dict[str, Template]:
        if self._templates is not None:
            return self._templates

        templates: Dict[str, Template] = {}
        if not self.root.is_dir():
            logger.error(f"Templates directory {self.root} does not exist")
            self._templates = templates
            return templates

        for path in sorted(p for p in self.root.iterdir() if p.is_dir()):
            template = self._load_template(path)
            if template is not None:
                templates[template.name] = template

        logger.info(f"Loaded {len(templates)} templates from {self.root}")
        self._templates = templates
        return templates

    def _load_template(self, path: Path) -> Optional[Template]:
        metadata_file = next(
            (path / name for name in METADATA_FILES if (path / name).is_file()), None
        )
        if metadata_file is None:
            logger.warning(f"Skipping template {path.name}: no metadata file")
            return None

        try:
            with open(metadata_file, "r", encoding="utf-8") as r_file:
                data = yaml.safe_load(r_file) or {}
            if not isinstance(data, dict):
                raise ValueError("metadata must be a mapping")
            data.setdefault("name", path.name)
            data.setdefault("exclude", list(DEFAULT_EXCLUDE))
            return Template(path=path, **data)
        except (OSError, yaml.YAMLError, ValueError, ValidationError, TypeError) as exc:
            logger.warning(f"Skipping template {path.name}: invalid {metadata_file.name} ({exc})")
            return None
