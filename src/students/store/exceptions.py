"""Custom exceptions for the student store."""


class StudentStoreError(Exception):
    """Base exception for student store errors."""


class StudentConflictError(StudentStoreError):
    """A student with the same enrollment or email already exists."""
