"""
FastAPI application entry point for the TCP hex client.

This is the backend for:
- Connecting to and disconnecting from a remote TCP device
- Sending hex command frames and returning replies
- Polling connection status and the activity log
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tcp_client.connection import SessionManager
from tcp_client.exceptions import (
    ConnectFailed,
    ConnectTimeout,
    InvalidEndpoint,
    InvalidHex,
    NotConnected,
    OperationTimeout,
    SocketError,
    TCPClientError,
)

from .api.dependencies import get_session_manager
from .api.v1 import api_router
from .config import AppSettings, get_settings

logger = logging.getLogger(__name__)

# Most specific class first; ConnectTimeout subclasses ConnectFailed.
ERROR_STATUS_CODES = (
    (InvalidHex, status.HTTP_400_BAD_REQUEST),
    (InvalidEndpoint, status.HTTP_400_BAD_REQUEST),
    (NotConnected, status.HTTP_409_CONFLICT),
    (ConnectTimeout, status.HTTP_504_GATEWAY_TIMEOUT),
    (ConnectFailed, status.HTTP_502_BAD_GATEWAY),
    (SocketError, status.HTTP_502_BAD_GATEWAY),
    (OperationTimeout, status.HTTP_504_GATEWAY_TIMEOUT),
)


def configure_logging(level: str) -> None:
    """Configure process logging once at startup."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def status_code_for(exc: TCPClientError) -> int:
    for exc_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Application lifespan handler.

        Owns the session manager: created on startup, disconnected on shutdown.
        """
        configure_logging(settings.log_level)
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")

        app.state.session_manager = SessionManager(settings=settings.session)

        yield

        logger.info("Shutting down application...")
        await app.state.session_manager.shutdown()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Send hex command frames to a TCP device and watch the replies",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)
    register_routes(app, settings)

    return app


def register_exception_handlers(app: FastAPI, settings: AppSettings) -> None:
    """Register global exception handlers."""

    @app.exception_handler(TCPClientError)
    async def tcp_client_exception_handler(request: Request, exc: TCPClientError):
        return JSONResponse(
            status_code=status_code_for(exc),
            content=exc.to_dict(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")

        if settings.debug:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    'success': False,
                    'error': 'INTERNAL_ERROR',
                    'message': str(exc),
                    'type': type(exc).__name__,
                },
            )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                'success': False,
                'error': 'INTERNAL_ERROR',
                'message': 'An internal error occurred',
            },
        )


def register_routes(app: FastAPI, settings: AppSettings) -> None:
    """Register API routes."""

    @app.get("/health", tags=["Health"])
    async def health_check(manager: SessionManager = Depends(get_session_manager)):
        """Check application health."""
        return {
            'status': 'healthy',
            'connected': manager.get_status().connected,
            'version': settings.app_version,
            'environment': settings.environment,
        }

    app.include_router(api_router, prefix=settings.api_prefix)


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()

    uvicorn.run(
        "app.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.reload,
    )
