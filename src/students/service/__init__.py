"""Student Service - CRUD and merge policy over the student aggregate."""

from students.service.exceptions import (
    NotFoundError,
    PhoneNumberIndexError,
    StudentNotFoundError,
    StudentServiceError,
)
from students.service.service import StudentService

__all__ = [
    "NotFoundError",
    "PhoneNumberIndexError",
    "StudentNotFoundError",
    "StudentService",
    "StudentServiceError",
]
