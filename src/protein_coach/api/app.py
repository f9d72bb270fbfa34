"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from protein_coach.api.meals import router as meals_router
from protein_coach.app_logging import configure_logging
from protein_coach.config import parse_allowed_origins
from protein_coach.containers import AppContainer
from protein_coach.errors import MealPipelineError

_CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_CORS_HEADERS,
    )

    @app.exception_handler(MealPipelineError)
    async def pipeline_error_handler(
        request: Request, exc: MealPipelineError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request %s %s failed: %s",
                request.method,
                request.url.path,
                exc,
                exc_info=exc,
            )
        else:
            logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Invalid body for %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=400, content={"error": _describe_validation_error(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled error for %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    app.include_router(meals_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request body: {location} {message}".replace("  ", " ").strip()
