"""Shared subscription bookkeeping for the drive viewmodels."""

from __future__ import annotations

from typing import Callable, Type

from cbxdrive.events.bus import Event, EventBus, Subscription


class BaseViewModel:
    """Track event subscriptions so that ``dispose()`` can cancel them all."""

    def __init__(self, event_bus: EventBus) -> None:
        self._event_bus = event_bus
        self._subscriptions: list[Subscription] = []

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def subscribe_event(self, event_type: Type[Event], handler: Callable) -> Subscription:
        sub = self._event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def dispose(self) -> None:
        for sub in self._subscriptions:
            self._event_bus.unsubscribe(sub)
        self._subscriptions.clear()
