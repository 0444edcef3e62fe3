"""
Users Backend API Server
CRUD over the users table of the hosted database, with generated API docs
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings
from database.connection import DatabaseClient
from api.routes import health, users
from middleware.security_headers import SecurityHeadersMiddleware
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, db_client: Optional[DatabaseClient] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Configuration; read from the environment when omitted
        db_client: Pre-built database client; when omitted one is created from
            settings and connected during startup

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings.from_env()
    owns_client = db_client is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        if owns_client:
            settings.validate()
            app.state.db_client = DatabaseClient.from_settings(settings)
            await app.state.db_client.connect()
        logger.info("Users Backend started")
        yield
        if owns_client:
            await app.state.db_client.close()
        logger.info("Users Backend stopped")

    app = FastAPI(
        title="Users Backend",
        description="CRUD API for users stored in the hosted database. "
                    "Successful responses are wrapped as `{\"value\": ...}`.",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Users", "description": "Create, list, update and delete users"},
            {"name": "Health", "description": "Service and database liveness"},
        ],
    )
    app.state.settings = settings
    app.state.db_client = db_client

    # CORS middleware; credentials cannot be combined with a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=not settings.allow_all_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Trace-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix="/users", tags=["Users"])

    return app
