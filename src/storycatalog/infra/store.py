from __future__ import annotations

"""
In-Memory State Store.

Process-local key/value state shared by the catalog and the navigator.
Patches are shallow-merged into the state under a lock; subscribers are
notified with a snapshot after each update.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], None]


class Store:
    """
    Thread-safe holder of the application state.

    get_state() hands out shallow copies, so callers never mutate the
    stored dictionary directly.
    """

    def __init__(self, initial_state: Optional[Mapping[str, Any]] = None) -> None:
        self._state: Dict[str, Any] = dict(initial_state or {})
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    def get_state(self) -> Dict[str, Any]:
        """Return a shallow snapshot of the current state."""
        with self._lock:
            return dict(self._state)

    def set_state(self, patch: Mapping[str, Any]) -> None:
        """
        Shallow-merge 'patch' into the state and notify subscribers.

        Args:
            patch: Keys to overwrite.
        """
        with self._lock:
            self._state.update(patch)
            snapshot = dict(self._state)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Store: Subscriber {listener!r} failed: {e}", exc_info=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked after every update.

        Returns:
            Callable[[], None]: Function removing the subscription.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
