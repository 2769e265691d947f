"""Two-way synchronisation between drive state and the addressable location.

The in-memory side is the search query and the selected view id.  The
location side is a query parameter (read from any accepted alias) and the
``folder`` parameter.  Query edits are written after a debounce; folder
navigation is written at once.  After every write the controller waits for
the matching echo and discards exactly that one notification.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Protocol, Union, assert_never

from cbxdrive.config import (
    ALL_VIEW_ID,
    FOLDER_PARAM,
    LOCATION_WRITE_DEBOUNCE_MS,
    QUERY_PARAM_ALIASES,
)
from cbxdrive.errors import LocationSyncError
from cbxdrive.gui.viewmodels.signal import ObservableProperty
from cbxdrive.utils.logging import get_logger

from .location import Location

LOGGER = get_logger(__name__)

CANONICAL_QUERY_PARAM = QUERY_PARAM_ALIASES[0]


@dataclass(frozen=True)
class LocationValue:
    """The part of the location this controller owns.

    ``folder`` is ``None`` when the parameter is absent, which means ``all``.
    """

    query: str = ""
    folder: Optional[str] = None


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PendingWrite:
    """A debounced write is armed.

    ``awaiting`` holds echoes of earlier writes that have not arrived yet,
    oldest first.
    """

    value: LocationValue
    awaiting: tuple[LocationValue, ...] = ()


@dataclass(frozen=True)
class AwaitingEcho:
    value: LocationValue
    earlier: tuple[LocationValue, ...] = ()


SyncState = Union[Idle, PendingWrite, AwaitingEcho]


class DebounceTimer(Protocol):
    """Restartable one-shot timer."""

    @property
    def active(self) -> bool:
        ...

    def start(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Arm the timer, replacing any pending callback."""

    def cancel(self) -> None:
        ...


def read_location(params: Mapping[str, str]) -> LocationValue:
    """Extract query and folder; the first non-empty alias wins."""

    query = ""
    for alias in QUERY_PARAM_ALIASES:
        candidate = params.get(alias) or ""
        if candidate.strip():
            query = candidate
            break
    folder = params.get(FOLDER_PARAM) or None
    return LocationValue(query=query, folder=folder)


def folder_param_for(view_id: str) -> Optional[str]:
    return None if not view_id or view_id == ALL_VIEW_ID else view_id


def apply_location_value(params: Mapping[str, str], value: LocationValue) -> dict[str, str]:
    """Return *params* rewritten to carry *value*.

    Only the canonical query alias is written; the others are removed.
    Unrelated parameters are left alone.
    """

    updated = {k: v for k, v in params.items() if k not in QUERY_PARAM_ALIASES}
    if value.query.strip():
        updated[CANONICAL_QUERY_PARAM] = value.query
    updated.pop(FOLDER_PARAM, None)
    if value.folder:
        updated[FOLDER_PARAM] = value.folder
    return updated


class LocationSyncController:
    """Keep ``query`` and ``view_id`` in step with a :class:`Location`.

    ``normalize_view`` maps a raw folder parameter to a view id the session
    recognises; unknown ids should map to ``all``.
    """

    def __init__(
        self,
        location: Location,
        timer: DebounceTimer,
        *,
        normalize_view: Callable[[str], str] = lambda view_id: view_id,
        delay_ms: int = LOCATION_WRITE_DEBOUNCE_MS,
    ) -> None:
        self._location = location
        self._timer = timer
        self._normalize_view = normalize_view
        self._delay_ms = delay_ms
        self._state: SyncState = Idle()
        self.query = ObservableProperty[str]("")
        self.view_id = ObservableProperty[str](ALL_VIEW_ID)
        self._location.changed.connect(self.on_location_changed)

    @property
    def state(self) -> SyncState:
        return self._state

    def start(self, stored_view_id: Optional[str]) -> LocationValue:
        """Adopt the startup location.

        A query or folder parameter in the location wins over the stored
        selected folder.  Nothing is written.
        """

        observed = read_location(self._location.params())
        if observed.folder:
            view_id = self._normalize_view(observed.folder)
        elif observed.query.strip():
            view_id = ALL_VIEW_ID
        else:
            view_id = self._normalize_view(stored_view_id or ALL_VIEW_ID)
        self.query.value = observed.query
        self.view_id.value = view_id
        self._state = Idle()
        return observed

    # ------------------------------------------------------------------
    # Internal -> location
    # ------------------------------------------------------------------
    def on_query_edited(self, text: str) -> None:
        """Record a query edit and (re)arm the debounced write."""

        self.query.value = text
        self._state = PendingWrite(self._desired_value(), self._awaited())
        self._timer.start(self._delay_ms, self._flush)

    def navigate_to_folder(self, view_id: str) -> None:
        """Switch view: drop any pending write, clear the query, write the folder."""

        awaiting = self._awaited()
        self._timer.cancel()
        self._state = _settled(awaiting)
        self.query.value = ""
        self.view_id.value = view_id
        self._write(self._desired_value(), awaiting)

    def flush_now(self) -> None:
        """Perform a pending debounced write immediately."""

        if isinstance(self._state, PendingWrite):
            self._timer.cancel()
            self._flush()

    def dispose(self) -> None:
        self._timer.cancel()
        self._state = Idle()
        self._location.changed.disconnect(self.on_location_changed)

    def _desired_value(self) -> LocationValue:
        query = self.query.value
        return LocationValue(
            query=query if query.strip() else "",
            folder=folder_param_for(self.view_id.value),
        )

    def _awaited(self) -> tuple[LocationValue, ...]:
        match self._state:
            case AwaitingEcho(value=value, earlier=earlier):
                return earlier + (value,)
            case PendingWrite(awaiting=awaiting):
                return awaiting
            case Idle():
                return ()
            case _:
                assert_never(self._state)

    def _flush(self) -> None:
        match self._state:
            case PendingWrite(awaiting=awaiting):
                self._state = _settled(awaiting)
                try:
                    self._write(self._desired_value(), awaiting)
                except LocationSyncError as exc:
                    LOGGER.error("Dropping debounced location write: %s", exc)
            case Idle() | AwaitingEcho():
                LOGGER.debug("Debounce fired with nothing pending")

    def _write(self, value: LocationValue, awaiting: tuple[LocationValue, ...] = ()) -> None:
        params = self._location.params()
        if read_location(params) == value:
            self._state = _settled(awaiting)
            return
        # Set before replacing: the location may notify synchronously.
        self._state = AwaitingEcho(value, awaiting)
        try:
            self._location.replace(apply_location_value(params, value))
        except Exception as exc:
            self._state = _settled(awaiting)
            raise LocationSyncError(f"Could not update location: {exc}") from exc

    # ------------------------------------------------------------------
    # Location -> internal
    # ------------------------------------------------------------------
    def on_location_changed(self, params: Mapping[str, str]) -> None:
        observed = read_location(params)
        awaited = self._awaited()
        if observed in awaited:
            # Echoes arrive in write order; anything older was superseded.
            remaining = awaited[awaited.index(observed) + 1 :]
            LOGGER.debug("Discarding location echo %s", observed)
            match self._state:
                case PendingWrite(value=value):
                    self._state = PendingWrite(value, remaining)
                case _:
                    self._state = _settled(remaining)
            return
        match self._state:
            case AwaitingEcho() | PendingWrite():
                self._timer.cancel()
                self._state = Idle()
            case Idle():
                pass
        self._apply_external(observed)

    def _apply_external(self, observed: LocationValue) -> None:
        view_id = self._normalize_view(observed.folder) if observed.folder else ALL_VIEW_ID
        self.query.value = observed.query
        self.view_id.value = view_id


def _settled(awaiting: tuple[LocationValue, ...]) -> SyncState:
    """State once no write is pending but *awaiting* echoes are in flight."""

    if not awaiting:
        return Idle()
    return AwaitingEcho(awaiting[-1], awaiting[:-1])


__all__ = [
    "AwaitingEcho",
    "DebounceTimer",
    "Idle",
    "LocationSyncController",
    "LocationValue",
    "PendingWrite",
    "SyncState",
    "apply_location_value",
    "folder_param_for",
    "read_location",
]
