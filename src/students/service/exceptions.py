"""Exceptions for the Student Service."""


class StudentServiceError(Exception):
    """Base exception for student service errors."""


class NotFoundError(StudentServiceError):
    """Requested resource does not exist."""


class StudentNotFoundError(NotFoundError):
    """Student with given ID does not exist."""


class PhoneNumberIndexError(NotFoundError):
    """Phone number index is outside the student's phone number list."""
