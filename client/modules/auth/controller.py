"""
Session orchestration shared by both session holders.

SessionController sequences login, signup and logout against the auth
service and local storage, and feeds the outcomes into the session state
machine. Subclasses decide how state changes are published by overriding
_on_state_changed.
"""

import logging
from typing import Optional

from shared.config import Settings, get_settings
from shared.storage import IKeyValueStore

from .exceptions import LoginInProgressError, SessionDisposedError
from .interfaces import IAuthService
from .models import UserRecord
from .session import (
    INITIAL_STATE,
    ErrorCleared,
    LoggedOut,
    LoginFailed,
    LoginStarted,
    LoginSucceeded,
    PasswordVisibilityToggled,
    SessionEvent,
    SessionState,
    SignupSucceeded,
    UserRestored,
    reduce,
)

logger = logging.getLogger(__name__)


UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


class SessionController:
    """
    Sign-in flow for one screen or process.

    Dependencies are injected so tests can pass fakes. Use create() to
    construct a holder and restore any persisted user in one step.
    """

    def __init__(
        self,
        auth_service: IAuthService,
        storage: IKeyValueStore,
        settings: Optional[Settings] = None,
    ):
        self._auth = auth_service
        self._storage = storage
        self._settings = settings or get_settings()
        self._state = INITIAL_STATE
        self._disposed = False

    @classmethod
    async def create(
        cls,
        auth_service: IAuthService,
        storage: IKeyValueStore,
        settings: Optional[Settings] = None,
    ):
        """Construct a holder and run check_login_status() once."""
        holder = cls(auth_service, storage, settings)
        await holder.check_login_status()
        return holder

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_user(self) -> Optional[UserRecord]:
        return self._state.user

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def _on_state_changed(self, previous: SessionState, current: SessionState) -> None:
        """Publish a state change. Called only when the snapshot differs."""
        pass

    def _dispatch(self, event: SessionEvent) -> None:
        if self._disposed:
            logger.debug(f"Ignoring {type(event).__name__} on disposed session")
            return
        previous = self._state
        current = reduce(previous, event)
        if current == previous:
            return
        self._state = current
        self._on_state_changed(previous, current)

    def _ensure_usable(self, operation: str) -> None:
        if self._disposed:
            raise SessionDisposedError(operation)

    def _ensure_idle(self, operation: str) -> None:
        if self._state.is_loading:
            raise LoginInProgressError(operation)

    async def login(self, email: str, password: str) -> bool:
        """
        Sign in and persist the user on success.

        Returns:
            True if the backend accepted the credentials

        Raises:
            LoginInProgressError: If a request is already in flight
            SessionDisposedError: If the holder has been disposed
        """
        self._ensure_usable("login")
        self._ensure_idle("login")

        logger.info(f"Starting login process for: {email}")
        self._dispatch(LoginStarted())

        try:
            response = await self._auth.login(email.strip(), password)
        except Exception as e:
            logger.error(f"Login error: {e}")
            self._dispatch(LoginFailed(UNEXPECTED_ERROR))
            return False

        if response.success and response.data is not None and not response.data.is_empty:
            await self._save_user(response.data)
            self._dispatch(LoginSucceeded(response.data))
            logger.info("Login successful")
            return True

        logger.warning(f"Login failed: {response.error}")
        self._dispatch(LoginFailed(response.error or "Login failed"))
        return False

    async def signup(
        self,
        username: str,
        email: str,
        password: str,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> bool:
        """
        Create an account. The new user still has to sign in afterwards.

        Raises:
            LoginInProgressError: If a request is already in flight
            SessionDisposedError: If the holder has been disposed
        """
        self._ensure_usable("signup")
        self._ensure_idle("signup")

        logger.info(f"Starting signup process for: {email}")
        self._dispatch(LoginStarted())

        try:
            response = await self._auth.signup(
                username=username.strip(),
                email=email.strip(),
                password=password,
                phone_number=phone_number,
                address=address,
            )
        except Exception as e:
            logger.error(f"Signup error: {e}")
            self._dispatch(LoginFailed(UNEXPECTED_ERROR))
            return False

        if response.success:
            self._dispatch(SignupSucceeded())
            logger.info("Signup successful")
            return True

        logger.warning(f"Signup failed: {response.error}")
        self._dispatch(LoginFailed(response.error or "Signup failed"))
        return False

    async def logout(self) -> bool:
        """
        Forget the signed-in user locally and reset to the initial state.

        Returns:
            False if local storage could not be cleared; state is kept then
        """
        self._ensure_usable("logout")
        self._ensure_idle("logout")

        try:
            await self._storage.remove(self._settings.user_storage_key)
            await self._storage.remove(self._settings.token_storage_key)
        except Exception as e:
            logger.error(f"Logout error: {e}")
            return False

        self._dispatch(LoggedOut())
        logger.info("User logged out successfully")
        return True

    def toggle_password_visibility(self) -> None:
        self._dispatch(PasswordVisibilityToggled())

    def clear_error(self) -> None:
        self._dispatch(ErrorCleared())

    async def check_login_status(self) -> None:
        """Restore a user persisted by an earlier session, if any."""
        try:
            data = await self._storage.get(self._settings.user_storage_key)
        except Exception as e:
            logger.error(f"Error checking login status: {e}")
            return

        if data is None:
            logger.info("No logged-in user found")
            return
        if not isinstance(data, dict):
            logger.warning("Stored user data is not a mapping, ignoring it")
            return

        user = UserRecord.from_json(data)
        if user.is_empty:
            logger.warning("Stored user data has no id, ignoring it")
            return

        self._dispatch(UserRestored(user))
        logger.info(f"User already logged in: {user.username}")

    async def _save_user(self, user: UserRecord) -> None:
        # A failed save does not fail the login.
        if self._disposed:
            logger.debug("Session disposed before user could be saved, skipping")
            return
        try:
            await self._storage.set(self._settings.user_storage_key, user.to_json())
            logger.info("User data saved to local storage")
        except Exception as e:
            logger.error(f"Error saving user data: {e}")

    def dispose(self) -> None:
        """
        Tear the holder down.

        Requests already in flight still complete, but their results are
        neither stored nor published.
        """
        if self._disposed:
            return
        self._disposed = True
        self._on_dispose()
        logger.debug("Session disposed")

    def _on_dispose(self) -> None:
        pass
