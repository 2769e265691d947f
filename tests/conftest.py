import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the package importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cbxdrive.app import DriveSession  # noqa: E402
from cbxdrive.config import KEY_FOLDER_TREE  # noqa: E402
from cbxdrive.domain.models import Asset  # noqa: E402
from cbxdrive.errors.handler import ErrorHandler  # noqa: E402
from cbxdrive.events import EventBus  # noqa: E402
from cbxdrive.library.catalog import StaticCatalog  # noqa: E402
from cbxdrive.settings import MemoryStore, PersistedState  # noqa: E402
from cbxdrive.utils.jsonio import dumps_compact  # noqa: E402

# Root > A > B > C > D, plus a sibling root X.
CHAIN_TREE = [
    {
        "id": "root",
        "name": "Root",
        "children": [
            {
                "id": "a",
                "name": "A",
                "children": [
                    {
                        "id": "b",
                        "name": "B",
                        "children": [
                            {"id": "c", "name": "C", "children": [{"id": "d", "name": "D"}]}
                        ],
                    }
                ],
            }
        ],
    },
    {"id": "x", "name": "X"},
]


class FakeTimer:
    """Manually fired stand-in for the debounce timer."""

    def __init__(self) -> None:
        self.callback: Optional[Callable[[], None]] = None
        self.delay_ms: Optional[int] = None
        self.starts = 0
        self.cancels = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.delay_ms = delay_ms
        self.callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self.callback = None
        self.cancels += 1

    def fire(self) -> None:
        callback, self.callback = self.callback, None
        assert callback is not None, "timer was not armed"
        callback()


def make_asset(
    asset_id: int,
    *,
    title: Optional[str] = None,
    ratio: str = "4/3",
    folder: Optional[str] = None,
    color: str = "neutral",
    src: Optional[str] = None,
) -> Asset:
    return Asset(
        id=asset_id,
        title=title or f"Asset {asset_id}",
        src=src or f"/demo/drive/asset-{asset_id}.jpg",
        ratio=ratio,
        folder_id=folder,
        color=color,
    )


@pytest.fixture
def asset_factory():
    return make_asset


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def chain_store() -> MemoryStore:
    return MemoryStore({KEY_FOLDER_TREE: dumps_compact(CHAIN_TREE)})


@pytest.fixture
def state(store) -> PersistedState:
    return PersistedState(store)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def error_handler(event_bus) -> ErrorHandler:
    return ErrorHandler(logging.getLogger("cbxdrive.tests"), event_bus)


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def session_factory(chain_store, event_bus, error_handler):
    """Build a session over the chain tree and the given catalog."""

    def factory(assets=(), *, store=None, location=None, timer=None) -> DriveSession:
        return DriveSession(
            PersistedState(store if store is not None else chain_store),
            StaticCatalog(assets),
            event_bus=event_bus,
            error_handler=error_handler,
            location=location,
            timer=timer,
        )

    return factory
