"""Canonical event definitions for selectable lists on the EventBus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from .event_bus import EventPayload

if TYPE_CHECKING:
    from selectkit.state.selectable_list import SelectableListVM

DEFAULT_TOPIC_PREFIX = "selectable"

# Topic suffixes, joined as "<prefix>.<list name>.<suffix>"
TOPIC_ITEMS = "items"
TOPIC_SELECT = "select"
TOPIC_SELECT_IDS = "select_ids"
TOPIC_SELECT_ALL = "select_all"
TOPIC_LOADING = "loading"
TOPIC_STATUS = "status"
TOPIC_VM = "vm"

COMMAND_TOPICS = (
    TOPIC_ITEMS,
    TOPIC_SELECT,
    TOPIC_SELECT_IDS,
    TOPIC_SELECT_ALL,
    TOPIC_LOADING,
    TOPIC_STATUS,
)


def list_topic(name: str, suffix: str, prefix: str = DEFAULT_TOPIC_PREFIX) -> str:
    """Build the full topic for one list, e.g. ``selectable.genres.items``."""
    return f"{prefix}.{name}.{suffix}"


def create_items_event(items: Iterable[Any], clear_existing: bool = False) -> EventPayload:
    """Create an items event (merge or replace the list)."""
    return {
        "items": list(items),
        "clear_existing": clear_existing,
    }


def create_select_event(items: Iterable[Any], clear_existing: bool = False) -> EventPayload:
    """Create a selection event."""
    return {
        "items": list(items),
        "clear_existing": clear_existing,
    }


def create_select_ids_event(ids: Iterable[Any]) -> EventPayload:
    """Create a select-by-id event."""
    return {"ids": list(ids)}


def create_select_all_event(select: bool = True) -> EventPayload:
    return {"select": select}


def create_loading_event(loading: bool) -> EventPayload:
    return {"loading": loading}


def create_status_event(value: str, error: Optional[Any] = None) -> EventPayload:
    """Create an explicit status event.

    Args:
        value: Status tag (idle, pending, success, error)
        error: Optional error payload, only meaningful for ``error``
    """
    event: EventPayload = {"value": value}
    if error is not None:
        event["error"] = error
    return event


def create_list_vm_event(name: str, vm: "SelectableListVM[Any]") -> EventPayload:
    """Create a view-model event republished after each change of a list."""
    selected: List[Any] = list(vm.selected)
    return {
        "name": name,
        "list": list(vm.list),
        "selected": selected,
        "status": vm.status.to_payload(),
        "total": len(vm.list),
        "selected_count": len(selected),
    }
