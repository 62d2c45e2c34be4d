"""Selectable list state container.

Tracks the full item set, a selected subset and a load status for one named
collection, and publishes each of them on a replay-latest channel together
with a combined view-model.

Items are caller records identified by ``id`` (attribute, or ``"id"`` key for
mappings). Lists and selections are kept unique by id in insertion order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Awaitable, Generic, Hashable, Iterable, Iterator, List, Sequence, Tuple, TypeVar, Union

from .channel import ReplayChannel, Subscription
from .status import LoadStatus, Status

T = TypeVar("T")

logger = logging.getLogger(__name__)

_MISSING = object()


def item_id(item: Any) -> Hashable:
    """Return the dedup key of an item.

    Falls back to the item itself when it has no ``id``, and to its identity
    when that is not hashable either.
    """
    if isinstance(item, Mapping):
        key = item.get("id", _MISSING)
    else:
        key = getattr(item, "id", _MISSING)
    if key is _MISSING:
        key = item
    try:
        hash(key)
    except TypeError:
        return ("object", id(item))
    return key


def merge_unique(existing: Sequence[T], incoming: Iterable[T], clear_existing: bool = False) -> Tuple[T, ...]:
    """Append ``incoming`` items whose id is not present yet.

    Existing entries are never replaced. With ``clear_existing`` the result is
    just ``incoming`` deduplicated, first occurrence winning.
    """
    merged: List[T] = [] if clear_existing else list(existing)
    seen = {item_id(item) for item in merged}
    for item in incoming:
        key = item_id(item)
        if key in seen:
            continue
        seen.add(key)
        merged.append(item)
    return tuple(merged)


@dataclass(frozen=True)
class SelectableListVM(Generic[T]):
    """Read-only snapshot of a selectable list."""

    list: Tuple[T, ...] = ()
    selected: Tuple[T, ...] = ()
    status: Status = field(default_factory=Status.idle)


class SelectableList(Generic[T]):
    """Reactive list of items with a selection and a load status.

    Channels (each replays its latest value to new subscribers):
        list:     all items
        selected: selected items
        status:   load status
        vm:       SelectableListVM combining the three

    Usage:
        genres = SelectableList("genres")
        genres.vm.subscribe(render)
        genres.set_loading(True)
        genres.add_items(fetched)        # status becomes success
        genres.select_items_by_id(["28", "12"])

    Every method runs synchronously and has delivered to all subscribers
    before it returns. Status writes are last-write-wins; callers sequence
    ``set_loading`` / ``add_items`` / ``update_status`` themselves.
    """

    def __init__(self, name: str) -> None:
        """Initialize an empty list.

        Args:
            name: Diagnostic label, used in logs and channel names only
        """
        self._name = name
        self._list: ReplayChannel[Tuple[T, ...]] = ReplayChannel((), name=f"{name}.list")
        self._selected: ReplayChannel[Tuple[T, ...]] = ReplayChannel((), name=f"{name}.selected")
        self._status: ReplayChannel[Status] = ReplayChannel(Status.idle(), name=f"{name}.status")
        self._vm: ReplayChannel[SelectableListVM[T]] = ReplayChannel(self._compose(), name=f"{name}.vm")

        # Registered first on each upstream channel, so the view-model is
        # current before any outside subscriber of list/selected/status runs.
        self._wiring = True
        self._upstream: List[Subscription] = [
            channel.subscribe(self._recompute) for channel in (self._list, self._selected, self._status)
        ]
        self._wiring = False
        logger.debug(f"SelectableList '{name}' created")

    # --- Channels ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def list(self) -> ReplayChannel[Tuple[T, ...]]:
        return self._list

    @property
    def selected(self) -> ReplayChannel[Tuple[T, ...]]:
        return self._selected

    @property
    def status(self) -> ReplayChannel[Status]:
        return self._status

    @property
    def vm(self) -> ReplayChannel[SelectableListVM[T]]:
        return self._vm

    view_model = vm

    # --- Snapshots ---

    @property
    def items(self) -> Tuple[T, ...]:
        return self._list.value

    @property
    def selection(self) -> Tuple[T, ...]:
        return self._selected.value

    @property
    def current_status(self) -> Status:
        return self._status.value

    def snapshot(self) -> SelectableListVM[T]:
        return self._vm.value

    def is_selected(self, item_or_id: Any) -> bool:
        """True if an item (or an id) is part of the selection."""
        key = item_id(item_or_id)
        return any(item_id(item) == key for item in self._selected.value)

    # --- Mutations ---

    def add_items(self, items: Iterable[T], clear_existing: bool = False) -> None:
        """Merge items into the list (or replace it) and mark status success.

        Args:
            items: Items to add; ids already in the list are ignored
            clear_existing: Replace the list instead of merging
        """
        merged = merge_unique(self._list.value, items, clear_existing)
        logger.debug(
            f"SelectableList '{self._name}': add_items -> {len(merged)} item(s) (clear={clear_existing})"
        )
        self._list.publish(merged)
        self._status.publish(Status.success())

    def select_items(self, items: Iterable[T], clear_existing: bool = False) -> None:
        """Merge items into the selection (or replace it). Status is untouched.

        Items are not checked against the list.
        """
        merged = merge_unique(self._selected.value, items, clear_existing)
        logger.debug(f"SelectableList '{self._name}': select_items -> {len(merged)} selected")
        self._selected.publish(merged)

    def select_items_by_id(self, ids: Iterable[Any]) -> None:
        """Add list items with the given ids to the selection; unknown ids are skipped."""
        by_id = {}
        for item in self._list.value:
            by_id.setdefault(item_id(item), item)

        found: List[T] = []
        for key in ids:
            try:
                item = by_id.get(key, _MISSING)
            except TypeError:
                item = _MISSING
            if item is _MISSING:
                logger.debug(f"SelectableList '{self._name}': id {key!r} not in list, skipped")
                continue
            found.append(item)
        self.select_items(found)

    def select_all(self, select: bool = True) -> None:
        """Select every list item (in list order), or clear the selection."""
        self._selected.publish(tuple(self._list.value) if select else ())

    def set_loading(self, loading: bool) -> None:
        """``True`` sets pending; ``False`` sets idle whatever the status was."""
        self._status.publish(Status.pending() if loading else Status.idle())

    def update_status(self, status: Union[Status, LoadStatus, str, dict]) -> None:
        """Replace the status, e.g. ``update_status(Status.failure(exc))``.

        An unknown tag or malformed mapping is logged and dropped.
        """
        try:
            coerced = Status.coerce(status)
        except (TypeError, ValueError) as exc:
            logger.warning(f"SelectableList '{self._name}': ignoring status {status!r}: {exc}")
            return
        self._status.publish(coerced)

    # --- Load tracking ---

    @contextmanager
    def track_load_status(self) -> Iterator["SelectableList[T]"]:
        """Mark the list pending for the duration of a load.

        On normal exit a status still ``pending`` becomes ``success`` (a
        status written inside the block, e.g. by ``add_items``, is kept). An
        exception sets ``error`` with the exception as payload and propagates.
        Cancellation or an interrupt resets a still ``pending`` status to
        ``idle`` and propagates.
        """
        self.set_loading(True)
        try:
            yield self
        except Exception as exc:
            logger.warning(f"SelectableList '{self._name}': load failed: {exc}")
            self.update_status(Status.failure(exc))
            raise
        except BaseException:
            if self._status.value.is_loading:
                logger.debug(f"SelectableList '{self._name}': load interrupted")
                self.set_loading(False)
            raise
        if self._status.value.is_loading:
            self._status.publish(Status.success())

    async def track_load_status_async(
        self,
        source: Awaitable[Iterable[T]],
        clear_existing: bool = False,
    ) -> Tuple[T, ...]:
        """Await ``source`` under load tracking and add what it returns.

        Returns:
            The list contents after the items were added
        """
        with self.track_load_status():
            items = await source
            self.add_items(items, clear_existing)
        return self._list.value

    # --- Internals ---

    def _compose(self) -> SelectableListVM[T]:
        return SelectableListVM(
            list=self._list.value,
            selected=self._selected.value,
            status=self._status.value,
        )

    def _recompute(self, _value: Any) -> None:
        if self._wiring:
            return
        self._vm.publish(self._compose())

    def __repr__(self) -> str:
        return (
            f"SelectableList(name={self._name!r}, items={len(self._list.value)}, "
            f"selected={len(self._selected.value)}, status={self._status.value.value.value!r})"
        )
