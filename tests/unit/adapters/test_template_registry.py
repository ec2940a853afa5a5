"""
Unit tests for the filesystem template registry.
"""

import json

import pytest

from src.adapter.services.template_registry import FilesystemTemplateRegistry
from src.app.provisioning.errors import TemplateNotFound


@pytest.fixture
def templates_dir(tmp_path):
    modern = tmp_path / "modern-blog"
    modern.mkdir()
    (modern / "template.yaml").write_text(
        "name: modern-blog\n"
        "version: 2.0.0\n"
        "description: Modern layout\n"
        "variables:\n"
        "  - name: BLOG_NAME\n"
        "    required: true\n"
        "  - name: THEME\n"
        "    default: modern\n"
        "config_files:\n"
        "  - site.js\n"
    )

    minimal = tmp_path / "minimal"
    minimal.mkdir()
    (minimal / "config.json").write_text(json.dumps({"description": "Minimal"}))

    broken = tmp_path / "broken"
    broken.mkdir()
    (broken / "template.yaml").write_text("name: [unclosed\n")

    (tmp_path / "no-metadata").mkdir()
    (tmp_path / "README.md").write_text("not a template")
    return tmp_path


def test_lists_valid_templates_sorted_by_name(templates_dir):
    registry = FilesystemTemplateRegistry(templates_dir)

    names = [template.name for template in registry.list_templates()]

    assert names == ["minimal", "modern-blog"]


def test_get_template_exposes_metadata(templates_dir):
    registry = FilesystemTemplateRegistry(templates_dir)

    template = registry.get_template("modern-blog")

    assert template.version == "2.0.0"
    assert template.path == templates_dir / "modern-blog"
    assert template.config_files == ["site.js"]
    assert template.variable("BLOG_NAME").required is True
    assert template.variable("THEME").default == "modern"
    assert "node_modules" in template.exclude


def test_json_metadata_defaults_name_to_directory(templates_dir):
    template = FilesystemTemplateRegistry(templates_dir).get_template("minimal")

    assert template.description == "Minimal"
    assert template.version == "1.0.0"


def test_unknown_template_raises(templates_dir):
    registry = FilesystemTemplateRegistry(templates_dir)

    with pytest.raises(TemplateNotFound) as exc_info:
        registry.get_template("missing")
    assert exc_info.value.code == "TEMPLATE_NOT_FOUND"


def test_missing_root_yields_empty_registry(tmp_path):
    registry = FilesystemTemplateRegistry(tmp_path / "nowhere")

    assert registry.list_templates() == []


def test_reload_picks_up_new_templates(templates_dir):
    registry = FilesystemTemplateRegistry(templates_dir)
    assert len(registry.list_templates()) == 2

    extra = templates_dir / "extra"
    extra.mkdir()
    (extra / "template.yaml").write_text("description: Extra\n")

    assert registry.reload() == 3
