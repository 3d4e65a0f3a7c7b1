"""Unit tests for API dependency wiring."""

from unittest.mock import MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from students.api import dependencies
from students.api.dependencies import (
    close_student_service,
    close_token_validator,
    get_current_user,
    get_student_service,
    get_token_validator,
    init_student_service,
    init_token_validator,
)
from students.auth import AuthenticationError
from students.service import StudentService


@pytest.fixture(autouse=True)
def reset_globals():
    """Leave no service or validator behind."""
    yield
    close_student_service()
    close_token_validator()


@pytest.mark.unit
class TestStudentService:
    """Tests for the StudentService dependency."""

    def test_get_before_init_raises(self) -> None:
        """RuntimeError until init_student_service is called."""
        with pytest.raises(RuntimeError, match="not initialized"):
            next(get_student_service())

    def test_init_then_get(self) -> None:
        """get_student_service yields the initialized service."""
        service = init_student_service("sqlite:///:memory:")

        assert isinstance(service, StudentService)
        assert next(get_student_service()) is service
        assert service.list_students() == []

    def test_reinit_disposes_previous_database(self) -> None:
        """A second init closes the first database."""
        init_student_service("sqlite:///:memory:")
        first = dependencies._database

        init_student_service("sqlite:///:memory:")

        assert dependencies._database is not first
        assert first._engine is None

    def test_close_resets(self) -> None:
        """close_student_service forgets the service."""
        init_student_service("sqlite:///:memory:")

        close_student_service()

        with pytest.raises(RuntimeError):
            next(get_student_service())


@pytest.mark.unit
class TestTokenValidator:
    """Tests for the TokenValidator dependency."""

    def test_get_before_init_raises(self) -> None:
        """RuntimeError until init_token_validator is called."""
        with pytest.raises(RuntimeError, match="not initialized"):
            next(get_token_validator())

    def test_close_calls_validator_close(self) -> None:
        """Validators with close() are closed."""
        validator = MagicMock()
        init_token_validator(validator)

        close_token_validator()

        validator.close.assert_called_once()
        with pytest.raises(RuntimeError):
            next(get_token_validator())

    def test_close_without_close_method(self, token_validator) -> None:
        """Validators without close() are simply dropped."""
        init_token_validator(token_validator)

        close_token_validator()


@pytest.mark.unit
class TestGetCurrentUser:
    """Tests for get_current_user."""

    def test_valid_token_returns_user(self, token_validator) -> None:
        """The validator's user is returned."""
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="valid-token")

        user = get_current_user(token_validator, credentials)

        assert user.username == "teacher"
        assert token_validator.seen == ["valid-token"]

    def test_missing_credentials_raises(self, token_validator) -> None:
        """AuthenticationError without calling the validator."""
        with pytest.raises(AuthenticationError):
            get_current_user(token_validator, None)

        assert token_validator.seen == []

    def test_rejected_token_raises(self, token_validator) -> None:
        """AuthenticationError when the validator returns None."""
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="expired")

        with pytest.raises(AuthenticationError):
            get_current_user(token_validator, credentials)
