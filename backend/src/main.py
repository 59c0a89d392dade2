"""Lifecycle Governance Service - Main FastAPI Application

This module creates and configures the FastAPI application, including:
- Business rule enforcement for governed mutation routes
- Middleware (request ID correlation, actor context, CORS)
- Exception handlers
- Business rules, health and metrics endpoints

The governor fronts the mutation handlers but does not implement them. The
host application passes its routers to ``create_app(routers=...)``; without
them a governed request that passes enforcement ends in a 404.
"""

import logging
from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, get_settings
from database import SessionLocal
from domain.governance.errors import DataAccessError
from infrastructure.repositories.governance_repository import sqlalchemy_port_scope

# Observability
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router

# Actor context
from auth.middleware import ActorContextMiddleware

# Enforcement
from enforcement.middleware import PortFactory, RequestGovernorMiddleware
from enforcement.routes import GovernedRoute, default_routes, policy_from_settings

# API v1 Routers
from api.v1.business_rules.router import router as business_rules_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler: logs startup and shutdown."""
    settings = app.state.settings
    logger.info("Lifecycle governance API starting up...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(
        f"Governing {len(app.state.governed_routes)} routes "
        f"(block_on_errors={settings.GOVERNANCE_BLOCK_ON_ERRORS}, "
        f"block_on_warnings={settings.GOVERNANCE_BLOCK_ON_WARNINGS})"
    )

    yield

    logger.info("Lifecycle governance API shutting down...")


def create_app(
    routes: Optional[Iterable[GovernedRoute]] = None,
    port_factory: Optional[PortFactory] = None,
    settings: Optional[Settings] = None,
    routers: Optional[Iterable[APIRouter]] = None
) -> FastAPI:
    """Build the application.

    Args:
        routes: Governed route table (defaults to ``default_routes()``)
        port_factory: Per-request data port scope (defaults to the SQLAlchemy repository)
        settings: Settings override (defaults to environment)
        routers: Host mutation routers mounted behind the governor, paths
            as declared in the route table

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    governed_routes = tuple(routes) if routes is not None else default_routes(policy_from_settings(settings))
    port_factory = port_factory or sqlalchemy_port_scope(SessionLocal)

    production = settings.ENV == "production"
    app = FastAPI(
        title="Lifecycle Governance API",
        description="Status lifecycle and business rule enforcement for order fulfilment",
        version="0.1.0",
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
        openapi_url=None if production else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.governed_routes = governed_routes
    app.state.port_factory = port_factory

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # Added innermost first: the governor runs last, after the actor is known.
    # =========================================================================

    app.add_middleware(
        RequestGovernorMiddleware,
        routes=governed_routes,
        port_factory=port_factory,
        header_name=settings.GOVERNANCE_WARNINGS_HEADER,
    )
    app.add_middleware(ActorContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", settings.GOVERNANCE_WARNINGS_HEADER],
    )
    # Request ID Middleware (outermost for proper correlation)
    app.add_middleware(RequestIDMiddleware)

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors with field-level details."""
        logger.warning(
            f"Validation error on {request.method} {request.url.path}",
            extra={"errors": exc.errors()}
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": jsonable_errors(exc),
            },
        )

    @app.exception_handler(DataAccessError)
    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle database errors.

        Logs the full error but returns a generic message to prevent
        information leakage.
        """
        logger.error(
            f"Database error on {request.method} {request.url.path}",
            exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "database_error",
                "message": "A database error occurred. Please try again later.",
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle uncaught exceptions without exposing details to the client."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}",
            exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred. Please try again later.",
            },
        )

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    # Observability (health, metrics)
    app.include_router(observability_router)

    # Business rules (dry-run evaluation, transition lookup)
    app.include_router(business_rules_router, prefix="/api/v1")

    # Governed mutation handlers supplied by the host
    for router in routers or ():
        app.include_router(router)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Lifecycle Governance API",
            "version": "0.1.0",
            "governed_routes": [route.key for route in governed_routes],
            "health": "/health",
            "metrics": "/metrics",
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may hold exception instances that JSONResponse cannot serialize
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


def _configure_logging() -> None:
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)


_configure_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().ENV == "development",
        log_level=get_settings().LOG_LEVEL.lower(),
    )
