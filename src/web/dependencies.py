"""
Dependency helpers for FastAPI routes.
"""
import logging

from fastapi import Request

from src.shared.errors import ConfigurationError
from src.shared.settings import AppSettings
from src.storage.schema_repository import SchemaRepository
from src.web.pipeline import RequestPipeline

log = logging.getLogger(__name__)


def get_settings(request: Request) -> AppSettings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise ConfigurationError("Application settings are not loaded")
    return settings


def get_schema_repository(request: Request) -> SchemaRepository:
    """Get SchemaRepository instance for the configured data root."""
    settings = get_settings(request)
    try:
        return SchemaRepository(settings.db_path)
    except OSError as e:
        log.error("Data root %s is not usable: %s", settings.data_root, e)
        raise ConfigurationError("Schema storage is not available") from e


def get_pipeline(request: Request) -> RequestPipeline:
    """Build the request pipeline from the per-process limiter and resolver."""
    settings = get_settings(request)
    state = request.app.state
    return RequestPipeline(
        limiter=state.rate_limiter,
        resolver=state.principal_resolver,
        limit=settings.rate_limit_requests,
        window_ms=settings.rate_limit_window_ms,
    )


def embed_snippet(app_url: str, schema_id: str) -> dict:
    """Live URL and <script src> snippet for a dynamic schema."""
    url = f"{app_url}/api/schemas/{schema_id}"
    return {"url": url, "script": f'<script src="{url}"></script>'}
