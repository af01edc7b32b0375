import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI

from content_api.adapters.sqlite.migrator import SQLiteMigrator
from content_api.api.deps import get_settings
from content_api.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = app.dependency_overrides.get(get_settings, get_settings)()

    # Load rules and migrate on startup (fail-fast)
    rules = load_rules(Path(settings.rules_path))
    logger.info("Rules loaded from %s (%s)", settings.rules_path, rules.project.slug)

    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()

    yield


app = FastAPI(
    title="Example Content API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from content_api.api.routes import examples  # noqa: E402

app.include_router(examples.router, prefix="/admin/api/examples", tags=["Examples"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
