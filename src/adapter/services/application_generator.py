import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import Dict

from src.app.provisioning.errors import GenerationIO
from src.app.services.application_generator import IApplicationGenerator
from src.domain.entities import Template

logger = logging.getLogger(__name__)

ENV_FILE = ".env.local"
ENV_PREFIX = "NEXT_PUBLIC_"


class FilesystemApplicationGenerator(IApplicationGenerator):
    """
    Writes application instances to `<deployments root>/<subdomain>`.

    Blocking file operations run in a worker thread.
    """

    def __init__(self, deployments_root: Path, package_prefix: str = "blog"):
        self.deployments_root = Path(deployments_root)
        self.package_prefix = package_prefix

    def instance_path(self, subdomain: str) -> Path:
        return self.deployments_root / subdomain

    async def generate(self, template: Template, variables: Dict[str, str]) -> Path:
        values = resolve_variables(template, variables)
        destination = self.instance_path(values["SUBDOMAIN"])
        try:
            await asyncio.to_thread(self._generate, template, values, destination)
        except OSError as exc:
            raise GenerationIO(f"Failed to write application to {destination}: {exc}") from exc
        logger.info(f"Generated {template.name} instance at {destination}")
        return destination

    def _generate(self, template: Template, values: Dict[str, str], destination: Path) -> None:
        if destination.exists():
            shutil.rmtree(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(
            template.path,
            destination,
            ignore=shutil.ignore_patterns(*template.exclude),
        )

        for relative in template.config_files:
            path = destination / relative
            if not path.is_file():
                logger.warning(f"Config file {relative} missing from template {template.name}")
                continue
            path.write_text(substitute(path.read_text(encoding="utf-8"), values), encoding="utf-8")

        self._write_env(destination, values)
        self._rewrite_package_json(destination, values)

    def _write_env(self, destination: Path, values: Dict[str, str]) -> None:
        lines = ["# Tenant configuration"]
        lines += [f"{ENV_PREFIX}{name}={value}" for name, value in sorted(values.items())]
        (destination / ENV_FILE).write_text("\n".join(lines) + "\n", encoding="utf-8")

    def _rewrite_package_json(self, destination: Path, values: Dict[str, str]) -> None:
        path = destination / "package.json"
        if not path.is_file():
            return
        try:
            package = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise GenerationIO(f"Invalid package.json in template: {exc}") from exc
        package["name"] = f"{self.package_prefix}-{values['SUBDOMAIN']}"
        package["description"] = f"Blog {values['BLOG_NAME']}"
        path.write_text(json.dumps(package, indent=2) + "\n", encoding="utf-8")


def resolve_variables(template: Template, variables: Dict[str, str]) -> Dict[str, str]:
    """Tenant values over template defaults; raises GenerationIO for missing required ones"""
    values = {v.name: v.default for v in template.variables if v.default is not None}
    values.update({name: value for name, value in variables.items() if value is not None})

    missing = [v.name for v in template.variables if v.required and not values.get(v.name)]
    if missing:
        raise GenerationIO(
            f"Template '{template.name}' requires values for: {', '.join(missing)}"
        )
    if not values.get("SUBDOMAIN"):
        raise GenerationIO("SUBDOMAIN is required to place the application instance")
    return {name: str(value) for name, value in values.items()}


def substitute(text: str, values: Dict[str, str]) -> str:
    for name, value in values.items():
        text = text.replace("{{" + name + "}}", value)
    return text
