"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from students.api.dependencies import (
    close_student_service,
    close_token_validator,
    init_student_service,
    init_token_validator,
)
from students.api.models import APIResponse
from students.api.routes import phone_numbers, students
from students.auth import AuthenticationError, GatewayTokenValidator
from students.config import Settings
from students.logging import get_logger, sanitize_for_log
from students.service import PhoneNumberIndexError, StudentNotFoundError
from students.store import StudentConflictError, StudentStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from students.auth import TokenValidator

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    init_student_service(settings.database_url)

    validator: TokenValidator | None = app.state.token_validator
    if validator is None:
        validator = GatewayTokenValidator(settings.oauth.base_url, timeout=settings.oauth.timeout)
    init_token_validator(validator)
    logger.info("Students API started (oauth=%s)", settings.oauth.base_url)

    yield
    close_token_validator()
    close_student_service()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def create_app(
    settings: Settings | None = None,
    token_validator: TokenValidator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Service settings. Defaults to Settings.from_env().
        token_validator: Validator to use instead of the OAuth gateway.
    """
    app = FastAPI(
        title="Students API",
        description="REST API for managing student records",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings if settings is not None else Settings.from_env()
    app.state.token_validator = token_validator

    register_exception_handlers(app)

    # Include routers
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(phone_numbers.router, prefix="/api/v1")

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map service, store and auth errors to enveloped JSON responses."""

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        _request: Request, _exc: AuthenticationError
    ) -> JSONResponse:
        response = _error(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
        response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(StudentNotFoundError)
    async def student_not_found_handler(
        _request: Request, _exc: StudentNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Student not found")

    @app.exception_handler(PhoneNumberIndexError)
    async def phone_number_not_found_handler(
        _request: Request, _exc: PhoneNumberIndexError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Phone number not found")

    @app.exception_handler(StudentConflictError)
    async def student_conflict_handler(
        _request: Request, _exc: StudentConflictError
    ) -> JSONResponse:
        return _error(
            status.HTTP_409_CONFLICT, "Student with this enrollment or email already exists"
        )

    @app.exception_handler(StudentStoreError)
    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Storage failure on %s %s: %s",
            request.method,
            request.url.path,
            sanitize_for_log(str(exc)),
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
