"""Shared pytest fixtures and configuration."""

import pytest

from students.auth import AuthenticatedUser, strip_bearer

VALID_TOKEN = "valid-token"

CLASS_A = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeTokenValidator:
    """Accepts only VALID_TOKEN and records every token it sees."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def validate(self, token: str) -> AuthenticatedUser | None:
        self.seen.append(token)
        if strip_bearer(token) != VALID_TOKEN:
            return None
        return AuthenticatedUser(
            id="user-1", username="teacher", email="teacher@example.com", roles=["admin"]
        )


# Shared fixtures


@pytest.fixture
def token_validator() -> FakeTokenValidator:
    """Token validator that needs no gateway."""
    return FakeTokenValidator()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header accepted by FakeTokenValidator."""
    return {"Authorization": f"Bearer {VALID_TOKEN}"}


@pytest.fixture
def student_payload() -> dict:
    """A valid create-student request body."""
    return {
        "name": "Ana Silva",
        "enrollment": "2024001",
        "email": "ana.silva@example.com",
        "courseCurriculum": "Computer Science",
        "phoneNumbers": [{"ddd": 51, "number": 999999999, "description": "mobile"}],
        "classes": [CLASS_A],
    }
