"""
Authentication module exceptions.

Backend failures never surface as exceptions; the auth client folds them
into an ApiResponse. These cover misuse of a session holder instead.
"""

from shared.exceptions import AuthenticationError


class AuthModuleError(AuthenticationError):
    """Base exception for auth module errors."""

    pass


class LoginInProgressError(AuthModuleError):
    """Raised when a login or signup is started while another is in flight."""

    def __init__(self, operation: str = "login"):
        super().__init__(
            f"Cannot start {operation}: another request is already in flight",
            code="LOGIN_IN_PROGRESS",
            details={"operation": operation},
        )


class SessionDisposedError(AuthModuleError):
    """Raised when an operation is started on a disposed session holder."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation}: session has been disposed",
            code="SESSION_DISPOSED",
            details={"operation": operation},
        )
