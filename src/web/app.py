"""
FastAPI application for the JSON-LD Schema Builder.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from src.shared.errors import AppError
from src.shared.logging_config import configure_logging
from src.shared.settings import load_settings
from src.storage.schema_repository import SchemaRepository
from src.web.auth import SessionPrincipalResolver
from src.web.pipeline import error_response
from src.web.rate_limit import InMemoryRateLimiter

log = logging.getLogger(__name__)

settings = load_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    SchemaRepository(app.state.settings.db_path)
    log.info("Schema store ready at %s", app.state.settings.db_path)
    yield


app = FastAPI(title="JSON-LD Schema Builder", version="0.3.0", lifespan=lifespan)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    https_only=settings.is_production,
)
app.state.settings = settings
app.state.rate_limiter = InMemoryRateLimiter()
app.state.principal_resolver = SessionPrincipalResolver()

# Import and include routers
from src.web.routers import schemas  # noqa: E402

app.include_router(schemas.router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Failures raised before a route's pipeline is running."""
    log.error("Request setup failed: %s", exc.message)
    return error_response(exc)


@app.get("/health")
async def health():
    return {"status": "ok"}


def main():
    configure_logging(
        level=settings.log_level,
        production=settings.is_production,
    )
    uvicorn.run(
        "src.web.app:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
    )


if __name__ == "__main__":
    main()
