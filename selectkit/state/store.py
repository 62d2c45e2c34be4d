"""Global State Store - Service Locator Pattern.

Provides access to named selectable lists from any UI component. Lists are
independent of each other; the store only hands out one instance per name.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from selectkit.core.configuration import SystemConfig, ValidationLevel, get_config
from selectkit.core.event_bus import EventBus

from .list_state import SelectableListState
from .selectable_list import SelectableList

logger = logging.getLogger(__name__)


class Store:
    """Global store of selectable lists.

    Usage:
        # During app initialization
        Store.initialize(event_bus)

        # In any UI component
        genres = Store.get().list("genres")
        genres.vm.subscribe(render)

        # Let bus services drive the list
        await Store.get().bind("genres")
    """

    _instance: Optional["Store"] = None

    def __init__(self, event_bus: Optional[EventBus] = None, config: Optional[SystemConfig] = None) -> None:
        """Initialize store.

        Note: Do not call directly. Use Store.initialize() instead.

        Args:
            event_bus: Shared event bus used by ``bind()``
            config: Configuration; loaded via ``get_config()`` if omitted
        """
        self.bus = event_bus
        self.config = config or get_config(ValidationLevel.LENIENT)
        self._lists: Dict[str, SelectableList[Any]] = {}
        self._bound: Dict[str, SelectableListState] = {}

    @classmethod
    def initialize(
        cls,
        event_bus: Optional[EventBus] = None,
        config: Optional[SystemConfig] = None,
    ) -> "Store":
        """Initialize the global store instance.

        Raises:
            RuntimeError: If store is already initialized
        """
        if cls._instance is not None:
            raise RuntimeError("Store already initialized!")

        cls._instance = cls(event_bus, config)
        return cls._instance

    @classmethod
    def get(cls) -> "Store":
        """Get the global store instance.

        Raises:
            RuntimeError: If store has not been initialized
        """
        if cls._instance is None:
            raise RuntimeError("Store not initialized! Call Store.initialize() first.")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the global instance. Primarily used for testing."""
        cls._instance = None

    def list(self, name: Optional[str] = None) -> SelectableList[Any]:
        """Return the list registered under ``name``, creating it if needed.

        Without a name the configured ``state.default_name`` is used.
        """
        name = name or self.config.state.default_name
        selectable = self._lists.get(name)
        if selectable is None:
            selectable = SelectableList(name)
            self._lists[name] = selectable
            logger.debug(f"Store: registered list '{name}'")
        return selectable

    async def bind(self, name: Optional[str] = None) -> SelectableListState:
        """Drive the named list from the store's event bus.

        Returns the existing adapter if the list is already bound.

        Raises:
            RuntimeError: If the store was initialized without an event bus
        """
        if self.bus is None:
            raise RuntimeError("Store has no event bus to bind lists to!")

        selectable = self.list(name)
        state = self._bound.get(selectable.name)
        if state is None:
            state = SelectableListState(selectable, self.bus, self.config)
            await state.initialize()
            self._bound[selectable.name] = state
        return state

    async def unbind(self, name: Optional[str] = None) -> bool:
        """Detach a list from the event bus. Returns False if it was not bound."""
        state = self._bound.pop(name or self.config.state.default_name, None)
        if state is None:
            return False
        await state.close()
        return True

    def names(self) -> List[str]:
        return list(self._lists)

    def drop(self, name: str) -> bool:
        """Forget a list. Returns False if no list had that name.

        A list still bound to the bus is kept; ``unbind()`` it first.
        """
        if name in self._bound:
            logger.warning(f"Store: list '{name}' is bound to the event bus, not dropped")
            return False
        return self._lists.pop(name, None) is not None

    def __contains__(self, name: object) -> bool:
        return name in self._lists
