"""Data models for authentication."""

from dataclasses import dataclass, field


@dataclass
class AuthenticatedUser:
    """Identity claims returned by the token gateway."""

    id: str
    username: str
    email: str
    roles: list[str] = field(default_factory=list)
