"""
Talencor Staffing site API - FastAPI application entry point.
"""
import asyncio
from contextlib import asynccontextmanager, suppress
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from talencor.config import get_settings
from talencor.database.connection import close_db, init_db
from talencor.utils.logger import get_logger, setup_logging

# Import models so Base.metadata has all tables before init_db()
import talencor.models  # noqa: F401

from talencor.api.routes import (
    admin_auth,
    admin_clients,
    ai_tools,
    client_portal,
    contact,
    dynamic_links,
    job_applications,
    job_postings,
    question_bank,
    resume,
    seo,
    site,
)
from talencor.api.middleware.error_handler import register_exception_handlers
from talencor.services.link_updater import run_link_updater

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: init DB, start the link refresher. Shutdown: stop it, close pool."""
    setup_logging()
    try:
        await init_db()
        logger.info("Application started", extra={"environment": settings.environment})
    except Exception as e:
        logger.warning(
            "Database connection failed at startup. Start PostgreSQL and check DATABASE_URL. Error: %s",
            e,
        )

    updater_task = None
    if settings.link_updater_enabled:
        updater_task = asyncio.create_task(run_link_updater(settings.link_update_interval_hours))
    yield
    if updater_task is not None:
        updater_task.cancel()
        with suppress(asyncio.CancelledError):
            await updater_task
    await close_db()
    logger.info("Application shutdown")


def health_payload() -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "version": settings.version,
    }


def create_application() -> FastAPI:
    app = FastAPI(
        title="Talencor Staffing API",
        description="Staffing agency site: intake forms, client portal, back office and AI career tools",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    prefix = settings.api_prefix
    app.include_router(admin_auth.router, prefix=prefix + "/admin", tags=["admin-auth"])
    app.include_router(admin_clients.router, prefix=prefix + "/admin", tags=["admin-clients"])
    app.include_router(client_portal.router, prefix=prefix, tags=["client-portal"])
    app.include_router(job_postings.router, prefix=prefix, tags=["job-postings"])
    app.include_router(contact.router, prefix=prefix, tags=["contact"])
    app.include_router(job_applications.router, prefix=prefix + "/job-applications", tags=["job-applications"])
    app.include_router(question_bank.router, prefix=prefix + "/question-bank", tags=["question-bank"])
    app.include_router(ai_tools.router, prefix=prefix, tags=["ai-tools"])
    app.include_router(resume.router, prefix=prefix + "/resume", tags=["resume"])
    app.include_router(dynamic_links.router, prefix=prefix + "/dynamic-links", tags=["dynamic-links"])
    app.include_router(seo.api_router, prefix=prefix + "/seo", tags=["seo"])
    app.include_router(site.router, prefix=prefix + "/site", tags=["site"])
    app.include_router(seo.router, tags=["seo"])

    @app.get("/")
    async def root():
        """Redirect to API docs."""
        return RedirectResponse(url="/docs")

    @app.get("/health")
    async def health():
        """Health check for load balancers and monitoring."""
        return health_payload()

    @app.get(prefix + "/health")
    async def api_health():
        return health_payload()

    return app


app = create_application()
