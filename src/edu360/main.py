"""
EDU360 FastAPI Application Entry Point

Main application initialization with:
- Lifespan management (startup/shutdown)
- CORS configuration
- Error handling middleware
- Router registration

Services are built once per application in the lifespan and stored on
`app.state`; endpoints reach them through `edu360.api.dependencies`.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edu360 import __version__
from edu360.api.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from edu360.api.v1.router import api_router
from edu360.config import Settings, get_settings
from edu360.config.logging_config import configure_logging, get_logger
from edu360.infrastructure.llm import OpenAIProvider
from edu360.infrastructure.metrics import metrics_router, update_system_info
from edu360.infrastructure.monitoring import init_sentry
from edu360.infrastructure.store import UserDirectory, create_event_store
from edu360.services.chat import ChatService
from edu360.services.dashboard import DashboardQueries
from edu360.services.escalation import EscalationEngine
from edu360.services.notifications import NotificationBroadcaster
from edu360.services.sentiment import SentimentClassifier
from edu360.services.wellness import WellnessService

logger = get_logger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings override (defaults to environment settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting EDU360 application",
            env=settings.env,
            version=__version__,
            store_backend=settings.store_backend,
        )
        update_system_info(settings.env)

        if settings.sentry_dsn.get_secret_value():
            init_sentry(
                settings.sentry_dsn.get_secret_value(),
                environment=settings.env,
            )

        store = create_event_store(settings)
        await store.initialize()
        logger.info("Event store initialized", backend=store.backend_name)

        broadcaster = NotificationBroadcaster(queue_size=settings.realtime.subscriber_queue_size)
        provider = OpenAIProvider(settings.openai)
        if not provider.is_configured():
            logger.warning("OpenAI API key not set, using heuristic analysis and mock chat")

        classifier = SentimentClassifier(
            provider,
            timeout_seconds=settings.escalation.classifier_timeout_seconds,
            temperature=settings.openai.analysis_temperature,
        )
        directory = UserDirectory(store)
        engine = EscalationEngine(
            store,
            broadcaster,
            classifier,
            directory=directory,
            notify_parents=settings.escalation.notify_parents,
        )

        app.state.settings = settings
        app.state.store = store
        app.state.broadcaster = broadcaster
        app.state.classifier = classifier
        app.state.wellness_service = WellnessService(store, broadcaster, engine, directory)
        app.state.dashboard_queries = DashboardQueries(store, broadcaster, classifier, directory)
        app.state.chat_service = ChatService(
            provider,
            store=store,
            temperature=settings.openai.chat_temperature,
            max_tokens=settings.openai.max_tokens,
        )

        try:
            if settings.seed_sample_data:
                await app.state.wellness_service.seed_sample_data()
            yield
        finally:
            logger.info("Shutting down EDU360 application")
            broadcaster.close_all()
            await store.close()
            logger.info("EDU360 application shutdown complete")

    app = FastAPI(
        title="EDU360 API",
        description="School wellness platform - escalation and notification backend",
        version=__version__,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=f"/api/{settings.api_version}")
    app.include_router(metrics_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint - basic info."""
        return {
            "name": "EDU360 API",
            "version": __version__,
            "status": "operational",
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "edu360.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.env == "development",
        log_level=settings.log_level.lower(),
    )
