"""
Main FastAPI application for Lead Concierge.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import conversation, leads
from .services import get_services, initialize_services
from config.settings import get_settings, Settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Lead Concierge starting up...")
    initialize_services()
    logger.info("Lead Concierge ready")
    yield
    logger.info("Lead Concierge shutting down...")
    get_services().shutdown()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.api_title,
        description="Guided lead discovery conversation with deterministic lead scoring.",
        version=settings.api_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(conversation.router, prefix="/api/v1", tags=["Conversation"])
    app.include_router(leads.router, prefix="/api/v1", tags=["Leads"])

    @app.get("/")
    async def root():
        return {
            "service": settings.brand_name,
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health():
        services = get_services()
        return {
            "status": "healthy" if services.is_ready and services.lead_store else "degraded",
            "services": services.health(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
