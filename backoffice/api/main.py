import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from backoffice import __version__
from backoffice.api.middleware.context import RequestContextMiddleware
from backoffice.api.routers import access, admin_pages, audit
from backoffice.common.logger import configure_logging
from backoffice.core.access import AccessControl, BestEffortAuditSink, NullAuditSink
from backoffice.core.config import Settings, get_settings
from backoffice.db.session import make_session_factory
from backoffice.services.audit_writer import SqlAlchemyAuditWriter

logger = logging.getLogger(__name__)


def build_access_control(
    settings: Settings,
    session_factory: Optional[sessionmaker] = None,
) -> AccessControl:
    """AccessControl wired to the database audit log when auditing is enabled."""
    if not settings.audit_enabled:
        return AccessControl(audit_sink=NullAuditSink())

    if session_factory is None:
        session_factory = make_session_factory(settings.database_url)

    sink = BestEffortAuditSink(
        SqlAlchemyAuditWriter(session_factory),
        max_workers=settings.audit_max_workers,
    )
    return AccessControl(audit_sink=sink)


def create_app(
    settings: Optional[Settings] = None,
    access_control: Optional[AccessControl] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """
    Application factory.

    The AccessControl instance and the session factory live on app.state.
    The audit writer and the audit query API share the session factory.
    """
    settings = settings or get_settings()
    session_factory = session_factory or make_session_factory(settings.database_url)
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        shutdown = getattr(app.state.access_control.audit_sink, "shutdown", None)
        if shutdown:
            shutdown(wait=True)

    app = FastAPI(
        title=settings.app_name,
        description="Back office department access control",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.access_control = access_control or build_access_control(settings, session_factory)

    app.add_middleware(RequestContextMiddleware)

    app.include_router(access.router, prefix="/api")
    app.include_router(audit.router, prefix="/api")
    app.include_router(admin_pages.router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    logger.info(f"{settings.app_name} started (audit {'on' if settings.audit_enabled else 'off'})")
    return app
