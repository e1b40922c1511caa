"""Authentication payloads and session state."""

from pydantic import model_validator

from inspectflow.schemas.base import ApiModel
from inspectflow.schemas.user import User


class AuthResponse(ApiModel):
    """Body returned by login, register and the current-user endpoint."""

    token: str
    user: User


class AuthState(ApiModel):
    """Client session state. ``user`` is set exactly when authenticated."""

    is_authenticated: bool = False
    user: User | None = None
    loading: bool = True
    error: str | None = None

    @model_validator(mode="after")
    def user_matches_authentication(self) -> "AuthState":
        if self.is_authenticated and self.user is None:
            raise ValueError("An authenticated state requires a user")
        if not self.is_authenticated and self.user is not None:
            raise ValueError("An unauthenticated state cannot carry a user")
        return self
