"""FastAPI application: wiring of settings, logging, middleware and routes."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import __version__
from .api import activities_router, sections_router
from .core.config import ConfigurationError, Environment, settings
from .core.logging_config import mask_credentials, setup_logging
from .database import DATABASE_URL, engine, get_db, init_db, is_postgresql
from .exceptions import SectionVaultError
from .middleware.exception_handler import section_vault_exception_handler
from .middleware.request_context import RequestContextMiddleware
from .models import Section

setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)

API_NAME = "SectionVault API"
_started = time.monotonic()


def _prepare_database() -> None:
    """Create missing tables, or exit with a readable message when the database is unreachable."""
    url = mask_credentials(DATABASE_URL)
    try:
        init_db(engine)
    except SQLAlchemyError as e:
        logger.critical(
            "Cannot use the database at %s (%s). For SQLite, check that the "
            "directory exists and is writable; for PostgreSQL, that the server is up.",
            url,
            e,
        )
        raise SystemExit(1) from e
    logger.info("Database ready", extra={"database": url})


def _check_settings() -> None:
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical("Startup blocked: %s", e)
        raise SystemExit(1) from e
    if settings.environment == Environment.DEVELOPMENT:
        for problem in settings.collect_insecure_settings():
            logger.warning("Insecure setting (allowed in development): %s", problem)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _check_settings()
    _prepare_database()
    logger.info(
        "%s %s started",
        API_NAME,
        __version__,
        extra={
            "environment": settings.environment.value,
            "backend": "postgresql" if is_postgresql() else "sqlite",
            "auth_enabled": settings.auth_enabled,
        },
    )
    yield


app = FastAPI(
    title=API_NAME,
    description=(
        "Versioned document sections for projects. Every edit archives the "
        "content it replaces; any archived version can be restored without "
        "losing history.\n\n"
        "With `AUTH_ENABLED=true`, writes need a `Bearer` token and reads are "
        "limited to the projects the caller holds grants on."
    ),
    version=__version__,
    lifespan=lifespan,
)

# Added last runs first: CORS wraps RequestContextMiddleware.
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)
app.add_exception_handler(SectionVaultError, section_vault_exception_handler)

app.include_router(sections_router)
app.include_router(activities_router)


@app.get("/")
def root():
    return {"name": API_NAME, "version": __version__, "status": "running"}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness plus a database probe. Always 200; a failed probe reports ``degraded``."""
    try:
        section_count = db.scalar(select(func.count()).select_from(Section)) or 0
        db_ok = True
    except SQLAlchemyError:
        logger.warning("Health probe could not reach the database", exc_info=True)
        section_count, db_ok = 0, False

    return {
        "status": "healthy" if db_ok else "degraded",
        "db": "ok" if db_ok else "error",
        "uptime_seconds": round(time.monotonic() - _started),
        "version": __version__,
        "section_count": section_count,
    }
