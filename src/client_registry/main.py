"""
Client Registry - Main Application
==================================

Client registration backend.

Endpoints:
- POST /            Register a client from the form field `name`
- GET  /clients     All clients as one summary line
- GET  /api/clients All clients as records
- GET  /health      Service and database health
- GET  /images/...  Image directory with listing
- GET  /...         Static web root (index.html)

Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Client entity and rendering
- Infrastructure: Connection pool and ORM models
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from client_registry.config import Settings, settings
from client_registry.infrastructure.database import Database, create_tables
from client_registry.clients.interfaces import clients_router
from client_registry.shared.api.middleware import (
    AccessLogMiddleware,
    CorrelationIDMiddleware,
    global_exception_handler
)
from client_registry.shared.api.static import mount_static
from client_registry.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment settings

    Returns:
        FastAPI: Configured application
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Application lifespan manager.

        STARTUP:
        1. Setup structured logging
        2. Create the connection pool (fatal on failure)
        3. Create database tables

        SHUTDOWN:
        1. Close database connections
        """
        # === STARTUP ===
        setup_logging(app_settings.log_level, app_settings.environment)
        logger.info("Starting Client Registry", extra={
            "version": app_settings.app_version,
            "environment": app_settings.environment
        })

        # ConfigurationException / DatabaseConnectionException abort startup
        database = await Database.create(
            app_settings.database_url,
            pool_size=app_settings.db_pool_size,
            max_overflow=app_settings.db_max_overflow,
            pool_timeout=app_settings.db_pool_timeout,
            query_timeout=app_settings.db_query_timeout,
            echo=app_settings.debug,
        )
        try:
            await create_tables(database)
        except Exception:
            await database.close()
            raise

        app.state.database = database
        logger.info("Client Registry started successfully")

        yield  # Application runs here

        # === SHUTDOWN ===
        logger.info("Shutting down Client Registry")
        await database.close()
        app.state.database = None
        logger.info("Client Registry shutdown complete")

    app = FastAPI(
        title="Client Registry API",
        description="Registers clients from a form and lists them.",
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = app_settings
    app.state.database = None

    # === CORS Middleware ===
    if app_settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(AccessLogMiddleware)
    # Added last so it wraps everything: the ID is set before logging and
    # unhandled errors become a 500 inside it
    app.add_middleware(CorrelationIDMiddleware)
    # Backstop for errors raised by CorrelationIDMiddleware itself
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(clients_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"], responses={
        200: {
            "description": "Service health",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "version": "1.0.0",
                        "environment": "development",
                        "checks": {"database": "connected"}
                    }
                }
            }
        }
    })
    async def health_check(request: Request):
        """
        Health check endpoint for load balancers and orchestrators.

        Reports "degraded" when no pooled connection can be used.
        """
        database: Optional[Database] = getattr(request.app.state, "database", None)
        if database is None:
            db_check = "not_initialized"
        elif await database.ping():
            db_check = "connected"
        else:
            db_check = "unavailable"

        return {
            "status": "healthy" if db_check == "connected" else "degraded",
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "checks": {"database": db_check}
        }

    # === Static Files (must stay last) ===
    mount_static(app, app_settings.static_root, app_settings.images_dir)

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "client_registry.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
