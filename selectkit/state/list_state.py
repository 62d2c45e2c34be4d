"""EventBus adapter for a selectable list.

Lets services that only know the EventBus drive a list (items arriving from a
fetch, selections restored from elsewhere, load status) and receive its
view-model back as ``<prefix>.<name>.vm`` events.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from selectkit.core import events
from selectkit.core.configuration import SystemConfig, ValidationLevel, get_config
from selectkit.core.event_bus import EventBus, EventPayload

from .channel import Subscription
from .selectable_list import SelectableList, SelectableListVM
from .status import Status

logger = logging.getLogger(__name__)


class SelectableListState:
    """Binds one SelectableList to EventBus topics.

    Topics (``prefix`` defaults to ``selectable``):
        <prefix>.<name>.items       {"items": [...], "clear_existing": bool}
        <prefix>.<name>.select      {"items": [...], "clear_existing": bool}
        <prefix>.<name>.select_ids  {"ids": [...]}
        <prefix>.<name>.select_all  {"select": bool}
        <prefix>.<name>.loading     {"loading": bool}
        <prefix>.<name>.status      {"value": str, "error": any}
        <prefix>.<name>.vm          published by this adapter
    """

    def __init__(
        self,
        selectable: SelectableList[Any],
        event_bus: EventBus,
        config: Optional[SystemConfig] = None,
    ) -> None:
        self.selectable = selectable
        self.bus = event_bus
        self.config = config or get_config(ValidationLevel.LENIENT)
        self.prefix = self.config.bus.topic_prefix

        self._handlers: Dict[str, Callable[[EventPayload], Awaitable[None]]] = {
            suffix: getattr(self, f"_handle_{suffix}") for suffix in events.COMMAND_TOPICS
        }
        self._vm_subscription: Optional[Subscription] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: Set[asyncio.Task] = set()
        self._started = False

    def topic(self, suffix: str) -> str:
        return events.list_topic(self.selectable.name, suffix, self.prefix)

    async def initialize(self) -> None:
        """Subscribe to the command topics and start republishing the view-model.

        Calling it again is a no-op.
        """
        if self._started:
            return

        for suffix, handler in self._handlers.items():
            await self.bus.subscribe(self.topic(suffix), handler)

        self._loop = asyncio.get_running_loop()
        if self.config.state.vm_republish:
            self._vm_subscription = self.selectable.vm.subscribe(self._republish_vm)

        self._started = True
        logger.debug(f"SelectableListState bound '{self.selectable.name}' under '{self.prefix}'")

    async def close(self) -> None:
        """Unsubscribe from the bus and stop republishing."""
        if not self._started:
            return

        for suffix, handler in self._handlers.items():
            await self.bus.unsubscribe(self.topic(suffix), handler)
        if self._vm_subscription is not None:
            self._vm_subscription.unsubscribe()
            self._vm_subscription = None
        self._started = False

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait until view-model events and all bus handlers have finished."""
        timeout = self.config.bus.idle_timeout if timeout is None else timeout
        while True:
            if self._pending:
                await asyncio.wait(list(self._pending), timeout=timeout)
            if not await self.bus.wait_until_idle(timeout):
                return False
            if not self._pending:
                return True

    # --- View-model republishing ---

    def _republish_vm(self, vm: SelectableListVM[Any]) -> None:
        if self._loop is None:
            return
        payload = events.create_list_vm_event(self.selectable.name, vm)
        task = self._loop.create_task(self.bus.publish(self.topic(events.TOPIC_VM), payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # --- Event Handlers ---

    async def _handle_items(self, payload: EventPayload) -> None:
        self.selectable.add_items(
            _as_list(payload.get("items")),
            bool(payload.get("clear_existing", False)),
        )

    async def _handle_select(self, payload: EventPayload) -> None:
        self.selectable.select_items(
            _as_list(payload.get("items")),
            bool(payload.get("clear_existing", False)),
        )

    async def _handle_select_ids(self, payload: EventPayload) -> None:
        self.selectable.select_items_by_id(_as_list(payload.get("ids")))

    async def _handle_select_all(self, payload: EventPayload) -> None:
        self.selectable.select_all(bool(payload.get("select", True)))

    async def _handle_loading(self, payload: EventPayload) -> None:
        self.selectable.set_loading(bool(payload.get("loading", False)))

    async def _handle_status(self, payload: EventPayload) -> None:
        """Handle explicit status events; unknown tags are logged and dropped."""
        try:
            status = Status(value=payload.get("value"), error=payload.get("error"))
        except ValueError as exc:
            logger.warning(f"Ignoring status event for '{self.selectable.name}': {exc}")
            return
        self.selectable.update_status(status)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
