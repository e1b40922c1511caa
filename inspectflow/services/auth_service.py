"""Client authentication state.

``reduce_auth_state`` is a pure reducer over ``AuthState``. ``AuthSession``
keeps the current state together with the bearer token used by the API
client.
"""

import logging
from dataclasses import dataclass

from inspectflow.enums import AuthActionType
from inspectflow.schemas.auth import AuthResponse, AuthState

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."
AUTH_FAILED_MESSAGE = "Authentication failed. Please log in again."

SUCCESS_ACTIONS = {
    AuthActionType.USER_LOADED,
    AuthActionType.LOGIN_SUCCESS,
    AuthActionType.REGISTER_SUCCESS,
}
FAILURE_ACTIONS = {
    AuthActionType.AUTH_ERROR,
    AuthActionType.LOGIN_FAIL,
    AuthActionType.REGISTER_FAIL,
}


class AuthStateError(ValueError):
    """Action is missing the payload its type requires."""

    pass


@dataclass
class AuthAction:
    type: AuthActionType
    response: AuthResponse | None = None
    error: str | None = None


def initial_auth_state() -> AuthState:
    return AuthState(is_authenticated=False, user=None, loading=True, error=None)


def reduce_auth_state(state: AuthState, action: AuthAction) -> AuthState:
    """Return the next state for an action. The input state is not modified."""
    if action.type == AuthActionType.AUTH_LOADING:
        return state.model_copy(update={"loading": True})

    if action.type in SUCCESS_ACTIONS:
        if action.response is None:
            raise AuthStateError(f"{action.type.value} requires an auth response")
        return AuthState(
            is_authenticated=True,
            user=action.response.user,
            loading=False,
            error=None,
        )

    if action.type in FAILURE_ACTIONS:
        if not action.error:
            raise AuthStateError(f"{action.type.value} requires an error message")
        return AuthState(
            is_authenticated=False, user=None, loading=False, error=action.error
        )

    # LOGOUT and SET_UNAUTHENTICATED
    return AuthState(is_authenticated=False, user=None, loading=False, error=None)


class AuthSession:
    """Current auth state plus the bearer token."""

    def __init__(self, token: str | None = None):
        self.token = token
        self.state = initial_auth_state()

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    def dispatch(self, action: AuthAction) -> AuthState:
        self.state = reduce_auth_state(self.state, action)
        if action.type in SUCCESS_ACTIONS and action.response.token:
            self.token = action.response.token
        elif action.type in FAILURE_ACTIONS or action.type == AuthActionType.LOGOUT:
            self.token = None
        return self.state

    def dispatch_loading(self) -> AuthState:
        return self.dispatch(AuthAction(AuthActionType.AUTH_LOADING))

    def login_succeeded(self, response: AuthResponse) -> AuthState:
        return self.dispatch(AuthAction(AuthActionType.LOGIN_SUCCESS, response=response))

    def register_succeeded(self, response: AuthResponse) -> AuthState:
        return self.dispatch(AuthAction(AuthActionType.REGISTER_SUCCESS, response=response))

    def user_loaded(self, response: AuthResponse) -> AuthState:
        return self.dispatch(AuthAction(AuthActionType.USER_LOADED, response=response))

    def failed(self, action_type: AuthActionType, error: str) -> AuthState:
        logger.info("Auth failure (%s): %s", action_type.value, error)
        return self.dispatch(AuthAction(action_type, error=error))

    def logout(self) -> AuthState:
        return self.dispatch(AuthAction(AuthActionType.LOGOUT))

    def set_unauthenticated(self) -> AuthState:
        return self.dispatch(AuthAction(AuthActionType.SET_UNAUTHENTICATED))
