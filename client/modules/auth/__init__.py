"""
Authentication module.

Handles login, signup and logout against the BillPoint backend and keeps
the resulting session state for the presentation layer.

Public API:
- IAuthService / AuthService: Backend calls, normalized to ApiResponse
- UserRecord: Signed-in user's data
- ApiResponse: Success/failure envelope
- SessionState / reduce: Session state machine
- SessionNotifier: Holder publishing whole snapshots
- ObservableSession: Holder publishing per-field observables
- Auth exceptions: LoginInProgressError, SessionDisposedError
"""

from .interfaces import IAuthService
from .models import ApiResponse, LoginResponse, UserRecord
from .exceptions import (
    AuthModuleError,
    LoginInProgressError,
    SessionDisposedError,
)
from .service import (
    AuthService,
    get_auth_service,
    reset_auth_service,
    map_login_response,
    map_signup_response,
    map_logout_response,
)
from .session import SessionPhase, SessionState, INITIAL_STATE, reduce
from .controller import SessionController
from .notifier import SessionNotifier
from .observable import Observable, ObservableSession

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "ApiResponse",
    "LoginResponse",
    "UserRecord",
    # Exceptions
    "AuthModuleError",
    "LoginInProgressError",
    "SessionDisposedError",
    # Service
    "AuthService",
    "get_auth_service",
    "reset_auth_service",
    "map_login_response",
    "map_signup_response",
    "map_logout_response",
    # Session state
    "SessionPhase",
    "SessionState",
    "INITIAL_STATE",
    "reduce",
    # Holders
    "SessionController",
    "SessionNotifier",
    "Observable",
    "ObservableSession",
]
