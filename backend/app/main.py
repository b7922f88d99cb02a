import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.api import api_router
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.db.session import Database
from app.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    The database handle and the notification dispatcher are created here
    and stored on ``app.state``; nothing connects at import time.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    db = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)
    dispatcher = NotificationDispatcher(
        db.session,
        maxsize=settings.NOTIFICATION_QUEUE_SIZE,
        workers=settings.NOTIFICATION_WORKERS,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create database tables and start the dispatcher on startup."""
        db.create_all()
        await dispatcher.start()
        logger.info("%s started", settings.APP_NAME)
        yield
        await dispatcher.stop()
        if database is None:
            db.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Recruitment backend: jobs, applications, interviews and notifications",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db
    app.state.dispatcher = dispatcher

    register_exception_handlers(app)

    # CORS Middleware - allowlist from env (comma-separated)
    allowed_origins = [
        origin.strip()
        for origin in settings.BACKEND_CORS_ORIGINS.split(",")
        if origin.strip()
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {"message": f"Welcome to {settings.APP_NAME} API"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint with notification dispatcher counters."""
        return {"status": "healthy", "notifications": dispatcher.stats()}

    # Include API router with /api/v1 prefix
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
