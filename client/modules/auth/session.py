"""
Session state machine.

SessionState is an immutable snapshot of the sign-in flow. Every change
goes through reduce(state, event), which returns a new snapshot; the
holders in notifier.py and observable.py only differ in how they publish
the result.

    Idle/Failed --LoginStarted--> InFlight
    InFlight --LoginSucceeded--> Authenticated
    InFlight --LoginFailed--> Failed
    any (not InFlight) --LoggedOut--> Idle
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field

from .models import UserRecord


class SessionPhase(str, Enum):
    """Where the sign-in flow currently stands."""

    IDLE = "idle"                    # Nobody signed in, nothing pending
    IN_FLIGHT = "in_flight"          # Request sent, no response processed yet
    AUTHENTICATED = "authenticated"  # A user is signed in
    FAILED = "failed"                # Last attempt failed, error is set


class SessionState(BaseModel):
    """Observable snapshot of the authentication flow."""

    is_loading: bool = Field(default=False, description="A request is in flight")
    error_message: Optional[str] = Field(None, description="Last failure, if any")
    user: Optional[UserRecord] = Field(None, description="Signed-in user")
    hide_password: bool = Field(default=True, description="Mask the password field")

    model_config = {"frozen": True}

    @property
    def phase(self) -> SessionPhase:
        if self.is_loading:
            return SessionPhase.IN_FLIGHT
        if self.error_message is not None:
            return SessionPhase.FAILED
        if self.user is not None and not self.user.is_empty:
            return SessionPhase.AUTHENTICATED
        return SessionPhase.IDLE

    @property
    def is_authenticated(self) -> bool:
        return self.phase == SessionPhase.AUTHENTICATED


INITIAL_STATE = SessionState()


@dataclass(frozen=True)
class LoginStarted:
    pass


@dataclass(frozen=True)
class LoginSucceeded:
    user: UserRecord


@dataclass(frozen=True)
class LoginFailed:
    error: str


@dataclass(frozen=True)
class SignupSucceeded:
    pass


@dataclass(frozen=True)
class UserRestored:
    user: UserRecord


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class PasswordVisibilityToggled:
    pass


@dataclass(frozen=True)
class ErrorCleared:
    pass


SessionEvent = Union[
    LoginStarted,
    LoginSucceeded,
    LoginFailed,
    SignupSucceeded,
    UserRestored,
    LoggedOut,
    PasswordVisibilityToggled,
    ErrorCleared,
]


def reduce(state: SessionState, event: SessionEvent) -> SessionState:
    """
    Apply an event to a snapshot and return the next snapshot.

    Pure function: the input state is never modified. Events that do not
    change anything return the same instance.
    """
    if isinstance(event, LoginStarted):
        return state.model_copy(update={"is_loading": True, "error_message": None})

    if isinstance(event, LoginSucceeded):
        return state.model_copy(
            update={"is_loading": False, "error_message": None, "user": event.user}
        )

    if isinstance(event, LoginFailed):
        # user is left as it was
        return state.model_copy(
            update={"is_loading": False, "error_message": event.error}
        )

    if isinstance(event, SignupSucceeded):
        return state.model_copy(update={"is_loading": False, "error_message": None})

    if isinstance(event, UserRestored):
        return state.model_copy(update={"user": event.user})

    if isinstance(event, LoggedOut):
        return INITIAL_STATE

    if isinstance(event, PasswordVisibilityToggled):
        return state.model_copy(update={"hide_password": not state.hide_password})

    if isinstance(event, ErrorCleared):
        if state.error_message is None:
            return state
        return state.model_copy(update={"error_message": None})

    raise TypeError(f"Unknown session event: {event!r}")
