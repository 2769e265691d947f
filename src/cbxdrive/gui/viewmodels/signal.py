"""Observer primitives for the drive viewmodels; no Qt dependency.

``Signal`` delivers callbacks synchronously in connection order and
``ObservableProperty`` wraps a value that announces its changes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal:
    """Synchronous callback list.

    A handler that raises is logged and skipped so that later handlers still
    run, mirroring ``EventBus.publish``.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []

    def connect(self, handler: Callable) -> Callable:
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in list(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)


class ObservableProperty(Generic[T]):
    """Value holder emitting ``changed(new_value, old_value)`` on real changes."""

    def __init__(self, initial_value: T) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self.changed.emit(new_value, old_value)
