from collections.abc import Iterator

import pytest

from selectkit.core.configuration import SystemConfig
from selectkit.state import SelectableList, Store

from tests.helpers import Genre


@pytest.fixture
def genres() -> SelectableList[Genre]:
    return SelectableList("genres")


@pytest.fixture
def config() -> SystemConfig:
    return SystemConfig()


@pytest.fixture(autouse=True)
def _store_teardown() -> Iterator[None]:
    yield
    Store.reset()
