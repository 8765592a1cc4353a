"""FastAPI application factory for the fetchproxy service."""

import logging

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .config import settings
from .exceptions import ProxyError
from .routers import health_router, proxy_router

logger = structlog.get_logger(__name__)


def configure_logging(level: str | None = None, console: bool | None = None) -> None:
    """Set up structured logging."""
    level = level or settings.log_level
    console = settings.debug if console is None else console
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if console
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )


async def proxy_error_handler(request: Request, exc: ProxyError) -> PlainTextResponse:
    """Render proxy errors as short plaintext diagnostics."""
    logger.warning(
        "Proxy request failed",
        status=exc.status_code,
        error=exc.message,
        path=request.url.path,
    )
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="fetchproxy",
        description="Single-hop HTTP forwarding proxy",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.add_exception_handler(ProxyError, proxy_error_handler)

    # Health first: the proxy route matches every path
    app.include_router(health_router)
    app.include_router(proxy_router)

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fetchproxy.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
