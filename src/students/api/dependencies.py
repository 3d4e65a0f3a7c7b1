"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from students.auth import AuthenticatedUser, AuthenticationError, TokenValidator
from students.service import StudentService
from students.store import DEFAULT_DATABASE_URL, Database, StudentRepository

# Global Database and StudentService (initialized on app startup)
_database: Database | None = None
_student_service: StudentService | None = None


def init_student_service(database_url: str = DEFAULT_DATABASE_URL) -> StudentService:
    """Initialize the global StudentService and its database."""
    global _database, _student_service  # noqa: PLW0603
    close_student_service()
    _database = Database(database_url)
    _database.create_tables()
    _student_service = StudentService(StudentRepository(_database))
    return _student_service


def close_student_service() -> None:
    """Close the global StudentService and dispose of its database."""
    global _database, _student_service  # noqa: PLW0603
    if _database is not None:
        _database.close()
    _database = None
    _student_service = None


def get_student_service() -> Generator[StudentService, None, None]:
    """Dependency that provides the StudentService instance."""
    if _student_service is None:
        raise RuntimeError("StudentService not initialized. Call init_student_service() first.")
    yield _student_service


# Type alias for dependency injection
StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]

# Global TokenValidator instance (initialized on app startup)
_token_validator: TokenValidator | None = None


def init_token_validator(validator: TokenValidator) -> None:
    """Initialize the global TokenValidator instance."""
    global _token_validator  # noqa: PLW0603
    _token_validator = validator


def close_token_validator() -> None:
    """Close the global TokenValidator instance."""
    global _token_validator  # noqa: PLW0603
    close = getattr(_token_validator, "close", None)
    if callable(close):
        close()
    _token_validator = None


def get_token_validator() -> Generator[TokenValidator, None, None]:
    """Dependency that provides the TokenValidator instance."""
    if _token_validator is None:
        raise RuntimeError("TokenValidator not initialized. Call init_token_validator() first.")
    yield _token_validator


TokenValidatorDep = Annotated[TokenValidator, Depends(get_token_validator)]

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    validator: TokenValidatorDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthenticatedUser:
    """Dependency that authenticates the request's bearer token.

    Raises:
        AuthenticationError: If the header is missing or malformed, or the
            gateway does not accept the token.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing or malformed Authorization header")

    user = validator.validate(credentials.credentials)
    if user is None:
        raise AuthenticationError("Invalid token")
    return user


CurrentUserDep = Annotated[AuthenticatedUser, Depends(get_current_user)]
