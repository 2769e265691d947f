from .signal import Signal, ObservableProperty
from .base import BaseViewModel
from .selection_viewmodel import DropAssets, SelectionState, SelectionViewModel

__all__ = [
    "BaseViewModel",
    "DropAssets",
    "ObservableProperty",
    "SelectionState",
    "SelectionViewModel",
    "Signal",
]
