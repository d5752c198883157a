"""
Helpdesk Field Engine - FastAPI Application

Exposes the template field engine, smart defaults and the ticket workflow
state machine over HTTP for UI layers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .utils.logger import setup_logging, get_logger

VERSION = "1.0.0"

setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the shared helpdesk backend client on shutdown"""
    logger.info(f"Starting Helpdesk Field Engine ({settings.environment})...")
    yield
    client = getattr(app.state, "helpdesk_client", None)
    if client is not None:
        await client.aclose()
    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    application = FastAPI(
        title="Helpdesk Field Engine",
        description="Dynamic template fields, smart defaults and ticket workflow for the banking helpdesk",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    _configure_middleware(application)
    register_error_handlers(application)
    _configure_routes(application)

    return application


def _configure_middleware(app: FastAPI) -> None:
    # allow_credentials must be False when allowing all origins
    allow_all = settings.cors_origins.strip() == "*"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )
    app.add_middleware(CorrelationIdMiddleware)


def _configure_routes(app: FastAPI) -> None:
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": settings.environment,
            "helpdesk_api": settings.helpdesk_api_base_url
        }


app = create_app()
