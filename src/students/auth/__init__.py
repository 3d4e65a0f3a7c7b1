"""Authentication - Bearer token validation via the external gateway."""

from students.auth.exceptions import AuthenticationError
from students.auth.models import AuthenticatedUser
from students.auth.validator import GatewayTokenValidator, TokenValidator, strip_bearer

__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "GatewayTokenValidator",
    "TokenValidator",
    "strip_bearer",
]
