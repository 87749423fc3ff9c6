"""FastAPI application factory.

The search backend is built once per application and handed to routes via
the get_backend dependency; tests swap it with dependency_overrides.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from banktrack import __version__
from banktrack.aggregation.traces import MalformedResultError
from banktrack.config import Settings
from banktrack.search.base import BackendError, SearchBackend

logger = logging.getLogger(__name__)


def get_backend(request: Request) -> SearchBackend:
    """Dependency returning the application's search backend."""
    return request.app.state.backend


def get_settings(request: Request) -> Settings:
    """Dependency returning the application's settings."""
    return request.app.state.settings


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return _error(400, problems or "Invalid request")

    @app.exception_handler(BackendError)
    async def backend_error(request: Request, exc: BackendError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} failed: {exc}")
        return _error(500, str(exc))

    @app.exception_handler(MalformedResultError)
    async def malformed_result(request: Request, exc: MalformedResultError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} got malformed result: {exc}")
        return _error(500, str(exc))


def create_app(
    settings: Settings | None = None,
    backend: SearchBackend | None = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Service settings. Defaults to Settings.from_env().
        backend: Search backend. Defaults to an ElasticsearchBackend built
            from settings.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings.from_env()

    if backend is None:
        from banktrack.search.elastic import ElasticsearchBackend

        backend = ElasticsearchBackend.from_settings(settings)

    app = FastAPI(
        title="banktrack API",
        description="Banking transaction analytics over Jaeger spans",
        version=__version__,
    )
    app.state.settings = settings
    app.state.backend = backend

    _register_error_handlers(app)

    # Include routes
    from banktrack.api.routes import banks, transactions

    app.include_router(banks.router)
    app.include_router(transactions.router)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
