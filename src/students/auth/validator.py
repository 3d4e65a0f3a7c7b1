"""Token validation against the external OAuth gateway."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from students.auth.models import AuthenticatedUser
from students.logging import get_logger

logger = get_logger("auth")

BEARER_PREFIX = "bearer "
VALIDATE_PATH = "/api/v1/validate"


class TokenValidator(Protocol):
    """Interface for anything that can turn a bearer token into a user."""

    def validate(self, token: str) -> AuthenticatedUser | None:
        """Return the token's user, or None if the token is not valid."""
        ...


def strip_bearer(token: str) -> str:
    """Remove a leading "Bearer " (any case) from a token."""
    if token[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        return token[len(BEARER_PREFIX) :].strip()
    return token.strip()


class GatewayTokenValidator:
    """Validates tokens by calling the gateway's introspection endpoint.

    Any failure yields None: a rejected or inactive token, a bad payload,
    a network error, or a token that cannot be sent as a header. Nothing is
    raised to the caller.
    """

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        """Initialize the validator.

        Args:
            base_url: Gateway base URL, e.g. "http://oauth:8000"
            timeout: Seconds to wait for the gateway
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the gateway."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def validate(self, token: str) -> AuthenticatedUser | None:
        """Validate a bearer token.

        Args:
            token: Raw token, with or without the "Bearer " prefix

        Returns:
            The authenticated user, or None if the token is not valid.
        """
        token = strip_bearer(token)
        if not token:
            return None

        try:
            response = self.client.post(
                f"{self.base_url}{VALIDATE_PATH}",
                headers={"Authorization": f"Bearer {token}"},
            )
            if not response.is_success:
                logger.info("Token rejected by gateway (status=%s)", response.status_code)
                return None
            return _user_from_payload(response.json())
        except httpx.HTTPError as e:
            logger.warning("Token gateway unreachable: %s", type(e).__name__)
        except Exception as e:
            # Invalid JSON, or a token httpx cannot encode as a header
            logger.warning("Token validation failed: %s", type(e).__name__)
        return None


def _user_from_payload(payload: Any) -> AuthenticatedUser | None:
    if not isinstance(payload, dict) or payload.get("active") is not True:
        return None

    realm_access = payload.get("realm_access")
    roles: list[str] = []
    if isinstance(realm_access, dict) and isinstance(realm_access.get("roles"), list):
        roles = [str(role) for role in realm_access["roles"]]

    return AuthenticatedUser(
        id=payload.get("sub") or "",
        username=payload.get("username") or payload.get("preferred_username") or "",
        email=payload.get("email") or "",
        roles=roles,
    )
