"""
FastAPI application entry point for the Stock Consultant Agent backend.
Following Factor 11/12: Triggerable & Stateless design.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .agent.runtime import AgentRuntime
from .api.chat import router as chat_router
from .api.health import router as health_router
from .core.config import get_settings
from .core.exceptions import AppError
from .database.mongodb import MongoDB
from .database.repositories.watchlist_repository import WatchlistRepository

# Set the root logger level to INFO so we can see detailed logs
logging.basicConfig(level=logging.INFO)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management for database connections and the agent."""
    settings = get_settings()

    logger.info("Starting Stock Consultant Agent", environment=settings.environment)

    mongodb = MongoDB()
    runtime: AgentRuntime | None = None

    try:
        await mongodb.connect(settings.mongodb_url)

        watchlist_repo = WatchlistRepository(
            mongodb.get_collection(settings.watchlist_collection)
        )
        await watchlist_repo.ensure_indexes()

        runtime = AgentRuntime.build(settings, mongodb)

        # Store in app state for dependency injection
        app.state.mongodb = mongodb
        app.state.agent_runtime = runtime

        logger.info("Agent runtime started", tools=list(runtime.registry.names))

        yield

    finally:
        if runtime is not None:
            await runtime.close()
        await mongodb.disconnect()
        logger.info("Agent runtime stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Stock Consultant Agent API",
        description="Conversational stock market assistant with tool-calling agent",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # CORS middleware for frontend communication
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Global exception handler for custom app errors
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """
        Handle all custom AppError exceptions with proper HTTP status codes.

        Model failures map to 502, bad conversation history to 400.
        """
        error_dict = exc.to_dict()

        # Log error with full context
        logger.error(
            "Application error occurred",
            path=request.url.path,
            method=request.method,
            **error_dict,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_type": exc.error_type},
        )

    # Include routers
    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(chat_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint for basic connectivity check."""
        return {
            "message": "Stock Consultant Agent API",
            "version": "0.1.0",
            "environment": settings.environment,
        }

    return app


# Create app instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",  # nosec B104 - Required for Docker container
        port=8000,
        reload=settings.is_development,
        log_config=None,  # Use structlog configuration
    )
