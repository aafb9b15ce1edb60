"""
Snapshot-style session holder.

Observers receive the whole SessionState every time it is replaced.
"""

import logging
from typing import Callable

from .controller import SessionController
from .session import SessionState

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class SessionNotifier(SessionController):
    """Publishes each new SessionState snapshot to its listeners."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._listeners: list[StateListener] = []

    def add_listener(
        self,
        listener: StateListener,
        fire_immediately: bool = False,
    ) -> Callable[[], None]:
        """
        Subscribe to state changes.

        Args:
            listener: Called with the new snapshot after each change
            fire_immediately: Also call it once with the current snapshot

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)
        if fire_immediately:
            listener(self._state)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _on_state_changed(self, previous: SessionState, current: SessionState) -> None:
        for listener in list(self._listeners):
            try:
                listener(current)
            except Exception:
                logger.exception("Session listener raised")

    def _on_dispose(self) -> None:
        self._listeners.clear()
