import os
from pathlib import Path

import pytest

from content_api.adapters.sqlite.migrator import SQLiteMigrator
from content_api.rules.loader import load_rules
from content_api.rules.models import Rules

ROOT_DIR = Path(__file__).resolve().parents[1]
RULES_PATH = ROOT_DIR / "rules.yaml"
MIGRATIONS_DIR = ROOT_DIR / "migrations"


@pytest.fixture
def rules() -> Rules:
    return load_rules(RULES_PATH)


@pytest.fixture
def test_data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def db_path(test_data_dir) -> str:
    """
    Path to a temporary SQLite DB with all migrations applied.
    """
    path = os.path.join(test_data_dir, "examples.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path
