"""
Rules loading and validation tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from content_api.rules.loader import load_rules
from content_api.rules.models import Rules


def test_project_rules_load(rules: Rules) -> None:
    assert rules.content.default_locale in rules.content.locales
    assert rules.content.default_template in rules.content.templates
    assert "examples" in rules.lists
    assert rules.workflow.transitions["publish"].to == "published"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "rules.yaml"
    path.write_text("project: [unclosed")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_schema_violation(tmp_path: Path) -> None:
    path = tmp_path / "rules.yaml"
    path.write_text("project:\n  slug: x\n")

    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(path)


def test_default_locale_must_be_listed(tmp_path: Path) -> None:
    path = tmp_path / "rules.yaml"
    path.write_text(
        """
project: {slug: x, rules_version: "1"}
content:
  locales: [en]
  default_locale: de
  templates: [default]
  default_template: default
workflow: {transitions: {}}
lists: {}
"""
    )

    with pytest.raises(ValueError, match="default_locale"):
        load_rules(path)
