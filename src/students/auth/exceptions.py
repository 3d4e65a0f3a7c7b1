"""Custom exceptions for authentication."""


class AuthenticationError(Exception):
    """Request is not authenticated.

    Missing, malformed and rejected tokens all raise this with no further detail.
    """
