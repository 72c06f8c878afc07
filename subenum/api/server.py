"""FastAPI REST API server for SUBENUM.

Exposes single-domain and batch subdomain enumeration over HTTP with optional
API key authentication. Every non-2xx answer is an ``ErrorResponse`` JSON
envelope.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from subenum import __version__
from subenum.api.auth import API_KEY_HEADER, require_api_key
from subenum.api.models import EnumerateRequest, HealthResponse
from subenum.core.config import Config
from subenum.core.errors import EnumerationError
from subenum.core.models import EnumerationResponse, ErrorResponse
from subenum.core.orchestrator import EnumerationOrchestrator
from subenum.utils.logger import get_logger

logger = get_logger(__name__)

_EXAMPLE_OPTIONS: Dict[str, Any] = {
    "threads": 10,
    "timeout": 30,
    "max_enumeration_time": 10,
    "all": True,
    "only_recursive": False,
}

_HTTP_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def _error(message: str, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Build an ``ErrorResponse`` JSON response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    config: Optional[Config] = None,
    orchestrator: Optional[EnumerationOrchestrator] = None,
) -> FastAPI:
    """Build and return a configured FastAPI application.

    Args:
        config: Service configuration. Defaults to built-in defaults.
        orchestrator: Pre-built orchestrator, mainly for tests. When ``None``
                      one driving the subfinder binary is built from *config*.

    Returns:
        Configured :class:`fastapi.FastAPI` instance.
    """
    cfg = config or Config()
    _app = FastAPI(
        title="Subfinder API",
        description="REST API for subdomain enumeration using Subfinder",
        version=__version__,
    )

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.api.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", API_KEY_HEADER],
    )

    _app.state.orchestrator = orchestrator or EnumerationOrchestrator.from_config(cfg)
    auth_dep = require_api_key(cfg.api)

    # ------------------------------------------------------------------
    # Error envelopes
    # ------------------------------------------------------------------

    @_app.exception_handler(EnumerationError)
    async def _enumeration_error(request: Request, exc: EnumerationError) -> JSONResponse:
        return _error(exc.message, exc.status_code)

    @_app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected payload on %s: %s", request.url.path, exc.errors())
        return _error("Invalid JSON payload", status.HTTP_400_BAD_REQUEST)

    @_app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = _HTTP_MESSAGES.get(exc.status_code, str(exc.detail))
        return _error(message, exc.status_code, headers=getattr(exc, "headers", None))

    @_app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # ------------------------------------------------------------------
    # Health / meta
    # ------------------------------------------------------------------

    @_app.get("/health", response_model=HealthResponse, tags=["meta"], summary="Health check")
    async def health() -> HealthResponse:
        """Return service health status."""
        return HealthResponse(version=__version__, timestamp=datetime.now(tz=timezone.utc))

    @_app.get("/", tags=["meta"], summary="API documentation")
    async def docs() -> Dict[str, Any]:
        """Describe the available endpoints with example payloads."""
        return {
            "name": "Subfinder API",
            "version": __version__,
            "description": "REST API for subdomain enumeration using Subfinder",
            "endpoints": {
                "GET /health": "Health check endpoint",
                "POST /enumerate": "Enumerate subdomains for a single domain",
                "POST /enumerate/batch": "Enumerate subdomains for multiple domains",
            },
            "example_single_domain": {
                "domain": "hackerone.com",
                "options": _EXAMPLE_OPTIONS,
            },
            "example_batch": {
                "domains": ["hackerone.com", "bugcrowd.com"],
                "options": _EXAMPLE_OPTIONS,
            },
        }

    # ------------------------------------------------------------------
    # Enumeration endpoints
    # ------------------------------------------------------------------

    @_app.post(
        "/enumerate",
        response_model=EnumerationResponse,
        response_model_exclude_none=True,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        tags=["enumeration"],
        summary="Enumerate subdomains for a single domain",
        dependencies=[Depends(auth_dep)],
    )
    async def enumerate_domain(body: EnumerateRequest, request: Request) -> EnumerationResponse:
        """Run the engine for ``domain`` and return merged, source-tagged results."""
        orchestrator: EnumerationOrchestrator = request.app.state.orchestrator
        return await orchestrator.enumerate(body.domain, body.options)

    @_app.post(
        "/enumerate/batch",
        response_model=EnumerationResponse,
        response_model_exclude_none=True,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        tags=["enumeration"],
        summary="Enumerate subdomains for multiple domains",
        dependencies=[Depends(auth_dep)],
    )
    async def enumerate_batch(body: EnumerateRequest, request: Request) -> EnumerationResponse:
        """Run the engine for every entry of ``domains`` into one result list.

        Domains whose enumeration fails are skipped and flagged in
        ``domains``; the request still succeeds.
        """
        orchestrator: EnumerationOrchestrator = request.app.state.orchestrator
        return await orchestrator.enumerate_batch(body.domains, body.options)

    @_app.options("/enumerate", include_in_schema=False)
    @_app.options("/enumerate/batch", include_in_schema=False)
    async def enumerate_options() -> Response:
        """Answer bare OPTIONS requests; real CORS preflights never reach here."""
        return Response(status_code=status.HTTP_200_OK)

    return _app


def run_server(config: Config) -> None:
    """Start the SUBENUM API server.

    Args:
        config: Loaded configuration; ``config.api`` supplies host and port.
    """
    server_app = create_app(config)
    logger.info("Subfinder API server starting on %s:%d", config.api.host, config.api.port)
    logger.info("Visit http://localhost:%d for API documentation", config.api.port)
    uvicorn.run(server_app, host=config.api.host, port=config.api.port, log_config=None)
