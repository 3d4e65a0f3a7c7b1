"""Student Store - Relational persistence for the student aggregate."""

from students.store.database import DEFAULT_DATABASE_URL, Database
from students.store.exceptions import StudentConflictError, StudentStoreError
from students.store.models import PhoneNumber, Student
from students.store.repository import StudentRepository

__all__ = [
    "DEFAULT_DATABASE_URL",
    "Database",
    "PhoneNumber",
    "Student",
    "StudentConflictError",
    "StudentRepository",
    "StudentStoreError",
]
