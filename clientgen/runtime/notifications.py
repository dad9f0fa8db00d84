"""Process-wide notification channel.

Observers subscribe to a notification name and are called with the posted
payload. The client posts ``NOT_AUTHORIZED`` whenever a request is answered
with HTTP 401.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "ResponseReceiveHTTPStatusCodeNotAuthorized"

Observer = Callable[[Any], None]


class NotificationCenter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observers: dict[str, list[Observer]] = {}

    def subscribe(self, name: str, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        with self._lock:
            self._observers.setdefault(name, []).append(observer)

        def unsubscribe() -> None:
            with self._lock:
                observers = self._observers.get(name, [])
                if observer in observers:
                    observers.remove(observer)

        return unsubscribe

    def post(self, name: str, payload: Any = None) -> None:
        with self._lock:
            observers = list(self._observers.get(name, []))
        for observer in observers:
            try:
                observer(payload)
            except Exception:
                logger.exception("Observer %r failed handling %s", observer, name)


default_center = NotificationCenter()
