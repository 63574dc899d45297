# tutorbook/main.py
"""
FastAPI application for the TutorBook booking backend.

Run locally with:

    uvicorn tutorbook.main:app --reload
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.config import settings
from .core.constants import BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import auth, bookings, doubts, health, metrics, tutors

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    if settings.auto_create_tables:
        init_db()

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routers."""
    application = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="Tutoring marketplace: tutor directory, bookings, feedback and doubts",
        lifespan=app_lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials="*" not in settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(PrometheusMiddleware)

    register_error_handlers(application)

    application.include_router(auth.router)
    application.include_router(tutors.router)
    application.include_router(bookings.router)
    application.include_router(doubts.router)
    application.include_router(health.router)
    application.include_router(metrics.router)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tutorbook.main:app", host="0.0.0.0", port=8000, reload=not settings.is_production)
