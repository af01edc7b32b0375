import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, HTTPException, Request, status

from content_api.adapters.clock import SystemClock
from content_api.adapters.sqlite.repos import SQLiteExampleListRepo, SQLiteExampleRepo
from content_api.components.content import ContentManager, create_content_manager
from content_api.domain.dimension import DimensionAttributes, InvalidDimensionAttributesError
from content_api.rules.loader import load_rules
from content_api.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("EXAMPLE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "examples.db")
        self.rules_path = Path(os.environ.get("EXAMPLE_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = str(self.base_dir / "migrations")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(Path(settings.rules_path).resolve())


# --- Repos ---
def get_example_repo(settings: Settings = Depends(get_settings)) -> SQLiteExampleRepo:
    return SQLiteExampleRepo(settings.db_path)


def get_example_list_repo(settings: Settings = Depends(get_settings)) -> SQLiteExampleListRepo:
    return SQLiteExampleListRepo(settings.db_path)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Services ---
def get_content_manager(
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> ContentManager:
    return create_content_manager(rules, clock)


# --- Dimension Attributes ---
def get_dimension_attributes(
    request: Request,
    rules: Rules = Depends(get_rules),
) -> DimensionAttributes:
    """
    Dimension attributes from the query string, e.g. ?locale=en&stage=draft.
    """
    try:
        return DimensionAttributes.from_query(
            request.query_params,
            locales=rules.content.locales,
            default_locale=rules.content.default_locale,
        )
    except InvalidDimensionAttributesError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
