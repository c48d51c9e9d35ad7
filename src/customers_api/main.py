"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.dependencies import build_repository
from .api.routes import customers, health
from .config import settings
from .data.customers_repository import CustomerRepository
from .errors import PatchError
from .schemas.problems import (
    PROBLEM_JSON,
    UNPROCESSABLE_ENTITY,
    VALIDATION_PROBLEM_DETAIL,
    errors_by_field,
    validation_problem,
)

logger = logging.getLogger(__name__)


def _problem_response(request: Request, errors: dict[str, list[str]], detail: str | None = None) -> JSONResponse:
    problem = validation_problem(
        errors,
        status=UNPROCESSABLE_ENTITY,
        instance=request.url.path,
        detail=detail or VALIDATION_PROBLEM_DETAIL,
    )
    return JSONResponse(
        status_code=UNPROCESSABLE_ENTITY,
        content=problem.model_dump(),
        media_type=PROBLEM_JSON,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Rejected {request.method} {request.url.path}: {len(exc.errors())} validation error(s)")
    return _problem_response(request, errors_by_field(exc.errors()))


async def patch_error_handler(request: Request, exc: PatchError) -> JSONResponse:
    logger.info(f"Rejected patch on {request.url.path}: {exc}")
    return _problem_response(request, exc.errors, detail=str(exc))


def create_app(repository: CustomerRepository | None = None) -> FastAPI:
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title=settings.app_name)
    app.state.repository = repository if repository is not None else build_repository(settings)

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PatchError, patch_error_handler)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(customers.router, prefix=settings.api_prefix)
    return app


app = create_app()
