"""Reactive state for selectable lists.

Architecture:
- ReplayChannel: latest value + subscriber list, replayed on subscribe
- SelectableList: list / selection / status channels and a combined view-model
- Store: service locator handing out one list per name
- SelectableListState: drives a list from EventBus topics
"""

from .channel import ReplayChannel, Subscription
from .list_state import SelectableListState
from .selectable_list import SelectableList, SelectableListVM, item_id, merge_unique
from .status import LoadStatus, Status
from .store import Store

__all__ = [
    "LoadStatus",
    "ReplayChannel",
    "SelectableList",
    "SelectableListState",
    "SelectableListVM",
    "Status",
    "Store",
    "Subscription",
    "item_id",
    "merge_unique",
]
