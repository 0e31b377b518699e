# backend/tutorly/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import auth, availability, bookings, health, metrics, teachers, users

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Ensure the schema exists on startup."""
    logger.info(f"Starting {API_TITLE} v{API_VERSION} ({settings.environment})")
    init_db()
    yield
    logger.info(f"Shutting down {API_TITLE}")


def create_app() -> FastAPI:
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=app_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(PrometheusMiddleware)

    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(teachers.router)
    app.include_router(availability.router)
    app.include_router(bookings.router)
    app.include_router(users.router)
    app.include_router(health.router)
    app.include_router(metrics.router)

    return app


app = create_app()
