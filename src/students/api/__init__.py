"""REST API for the Students service."""

from students.api.app import create_app
from students.api.models import (
    APIResponse,
    PhoneNumberCreate,
    PhoneNumberResponse,
    PhoneNumberUpdate,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)

__all__ = [
    "APIResponse",
    "PhoneNumberCreate",
    "PhoneNumberResponse",
    "PhoneNumberUpdate",
    "StudentCreate",
    "StudentResponse",
    "StudentUpdate",
    "create_app",
]
