"""SelectKit: reactive selectable-list state for UI widgets."""

from .core.event_bus import EventBus
from .state import (
    LoadStatus,
    ReplayChannel,
    SelectableList,
    SelectableListState,
    SelectableListVM,
    Status,
    Store,
    Subscription,
)

__all__ = [
    "EventBus",
    "LoadStatus",
    "ReplayChannel",
    "SelectableList",
    "SelectableListState",
    "SelectableListVM",
    "Status",
    "Store",
    "Subscription",
]

__version__ = "0.1.0"
