"""
Field-style session holder.

Each part of the session (loading flag, error, user, password mask) is its
own Observable, so a widget can watch just the field it renders.
"""

import logging
from typing import Callable, Generic, Optional, TypeVar

from .controller import SessionController
from .models import UserRecord
from .session import SessionState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """A value cell that notifies listeners when the value changes."""

    def __init__(self, value: T):
        self._value = value
        self._listeners: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def listen(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Subscribe; returns a callable that unsubscribes."""
        self._listeners.append(listener)

        def cancel() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return cancel

    def _set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Observable listener raised")

    def _close(self) -> None:
        self._listeners.clear()


class ObservableSession(SessionController):
    """Mirrors each SessionState field into its own Observable."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        state = self._state
        self.loading: Observable[bool] = Observable(state.is_loading)
        self.error_message: Observable[Optional[str]] = Observable(state.error_message)
        self.user: Observable[Optional[UserRecord]] = Observable(state.user)
        self.hide_password: Observable[bool] = Observable(state.hide_password)

    def _on_state_changed(self, previous: SessionState, current: SessionState) -> None:
        self.loading._set(current.is_loading)
        self.error_message._set(current.error_message)
        self.user._set(current.user)
        self.hide_password._set(current.hide_password)

    def _on_dispose(self) -> None:
        for field in (self.loading, self.error_message, self.user, self.hide_password):
            field._close()
