import asyncio

import pytest

from selectkit.state import LoadStatus, SelectableList, SelectableListVM, Status

from tests.helpers import GENRES, Genre, ids


def latest_vm(selectable: SelectableList) -> SelectableListVM:
    received = []
    sub = selectable.vm.subscribe(received.append)
    sub.unsubscribe()
    return received[-1]


def test_initial_state_is_empty_and_idle(genres: SelectableList) -> None:
    assert genres.name == "genres"
    assert genres.list.value == ()
    assert genres.selected.value == ()
    assert genres.status.value == Status(value=LoadStatus.IDLE)

    vm = latest_vm(genres)
    assert vm.list == ()
    assert vm.selected == ()
    assert vm.status.value == "idle"


def test_set_loading_toggles_pending_and_idle(genres: SelectableList) -> None:
    genres.set_loading(True)
    assert latest_vm(genres).status.value == "pending"

    genres.set_loading(False)
    assert latest_vm(genres).status.value == "idle"


def test_add_items_marks_success_then_loading_false_resets_to_idle(genres: SelectableList) -> None:
    genres.set_loading(True)
    genres.add_items([GENRES[0], GENRES[1]])

    vm = latest_vm(genres)
    assert vm.status.value == "success"
    assert len(vm.list) == 2

    genres.set_loading(False)
    assert latest_vm(genres).status.value == "idle"


def test_add_items_with_no_items_still_marks_success(genres: SelectableList) -> None:
    genres.add_items([])
    assert genres.items == ()
    assert genres.current_status == Status.success()


def test_set_loading_false_overwrites_error(genres: SelectableList) -> None:
    genres.update_status(Status.failure("boom"))
    genres.set_loading(False)
    assert genres.current_status == Status.idle()


def test_add_items_ignores_known_ids(genres: SelectableList) -> None:
    genres.add_items([GENRES[0], GENRES[1]])
    genres.add_items([GENRES[0], GENRES[1]])
    assert len(latest_vm(genres).list) == 2

    genres.add_items([GENRES[2], GENRES[3]])
    vm = latest_vm(genres)
    assert ids(vm.list) == ["28", "12", "16", "35"]
    assert vm.selected == ()


def test_add_items_keeps_existing_entry_for_duplicate_id(genres: SelectableList) -> None:
    original = Genre("28", "Action")
    genres.add_items([original])
    genres.add_items([Genre("28", "Renamed"), GENRES[1]])

    assert genres.items[0] is original
    assert ids(genres.items) == ["28", "12"]


def test_add_items_dedups_within_one_call(genres: SelectableList) -> None:
    first = Genre("1", "first")
    genres.add_items([first, Genre("2", "b"), Genre("1", "second")])
    assert ids(genres.items) == ["1", "2"]
    assert genres.items[0] is first


def test_add_items_clear_existing_replaces_list(genres: SelectableList) -> None:
    genres.add_items([GENRES[0], GENRES[1]])
    genres.add_items([GENRES[2], GENRES[3], GENRES[2]], True)
    assert ids(genres.items) == ["16", "35"]


def test_add_items_accepts_mappings_and_numeric_ids(genres: SelectableList) -> None:
    genres.add_items([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}, {"id": 1, "name": "c"}])
    assert [item["name"] for item in genres.items] == ["a", "b"]


def test_add_items_tolerates_items_without_id(genres: SelectableList) -> None:
    genres.add_items(["x", "y", "x", {"name": "no id"}])
    assert genres.items == ("x", "y", {"name": "no id"})


@pytest.fixture
def loaded(genres: SelectableList) -> SelectableList:
    genres.add_items(GENRES[:4])
    return genres


def test_select_items_merges_selection(loaded: SelectableList) -> None:
    assert len(latest_vm(loaded).selected) == 0

    loaded.select_items([GENRES[1], GENRES[3]])
    assert len(latest_vm(loaded).selected) == 2

    loaded.select_items([GENRES[2]])
    assert len(latest_vm(loaded).selected) == 3

    loaded.select_items([GENRES[2]])
    assert ids(latest_vm(loaded).selected) == ["12", "35", "16"]


def test_select_items_clear_existing_replaces_selection(loaded: SelectableList) -> None:
    loaded.select_items([GENRES[1], GENRES[3]])
    loaded.select_items([GENRES[2]], True)
    assert ids(loaded.selection) == ["16"]

    loaded.select_items([GENRES[1]])
    assert ids(loaded.selection) == ["16", "12"]


def test_select_items_does_not_touch_status(loaded: SelectableList) -> None:
    loaded.set_loading(True)
    loaded.select_items([GENRES[0]])
    assert loaded.current_status == Status.pending()


def test_select_items_accepts_items_missing_from_list(loaded: SelectableList) -> None:
    loaded.select_items([GENRES[10]])
    assert ids(loaded.selection) == ["27"]
    assert GENRES[10] not in loaded.items


def test_select_items_by_id_resolves_against_list(loaded: SelectableList) -> None:
    loaded.select_items_by_id(["35", "missing", "28", "35"])
    assert ids(loaded.selection) == ["35", "28"]
    assert loaded.selection[0] is GENRES[3]

    loaded.select_items_by_id(["12"])
    assert ids(loaded.selection) == ["35", "28", "12"]


def test_select_items_by_id_tolerates_unhashable_ids(loaded: SelectableList) -> None:
    loaded.select_items_by_id([["28"], None])
    assert loaded.selection == ()


def test_select_all_selects_and_clears(genres: SelectableList) -> None:
    genres.add_items(GENRES, True)
    vm = latest_vm(genres)
    assert len(vm.list) == len(GENRES)
    assert len(vm.selected) == 0

    genres.select_all()
    assert len(latest_vm(genres).selected) == len(GENRES)
    genres.select_all()
    assert genres.selection == genres.items

    genres.select_all(False)
    assert len(latest_vm(genres).selected) == 0


def test_select_all_replaces_foreign_selection(loaded: SelectableList) -> None:
    loaded.select_items([GENRES[10]])
    loaded.select_all()
    assert ids(loaded.selection) == ["28", "12", "16", "35"]


def test_is_selected_accepts_items_and_ids(loaded: SelectableList) -> None:
    loaded.select_items([GENRES[1]])
    assert loaded.is_selected(GENRES[1])
    assert loaded.is_selected("12")
    assert not loaded.is_selected("28")


def test_update_status_accepts_tags_and_payloads(genres: SelectableList) -> None:
    error = RuntimeError("fetch failed")
    genres.update_status(Status.failure(error))
    assert genres.current_status.value is LoadStatus.ERROR
    assert genres.current_status.error is error

    genres.update_status("success")
    assert genres.current_status == Status.success()

    genres.update_status(LoadStatus.PENDING)
    assert genres.current_status.is_loading


def test_channels_replay_current_value_to_late_subscribers(genres: SelectableList) -> None:
    genres.add_items(GENRES[:3])
    genres.select_items([GENRES[0]])

    lists, selections, statuses = [], [], []
    genres.list.subscribe(lists.append)
    genres.selected.subscribe(selections.append)
    genres.status.subscribe(statuses.append)

    assert [ids(value) for value in lists] == [["28", "12", "16"]]
    assert [ids(value) for value in selections] == [["28"]]
    assert statuses == [Status.success()]


def test_add_items_pushes_list_status_and_vm(genres: SelectableList) -> None:
    lists, statuses, vms = [], [], []
    genres.list.subscribe(lists.append)
    genres.status.subscribe(statuses.append)
    genres.vm.subscribe(vms.append)

    genres.add_items([GENRES[0]])

    assert len(lists) == 2
    assert [status.value for status in statuses] == ["idle", "success"]
    assert vms[-1] == SelectableListVM(list=(GENRES[0],), selected=(), status=Status.success())


def test_vm_is_current_when_list_subscribers_run(genres: SelectableList) -> None:
    seen = []
    genres.list.subscribe(lambda _value: seen.append(genres.vm.value.list))
    genres.add_items([GENRES[0]])
    assert seen[-1] == (GENRES[0],)


def test_vm_channel_aliases(genres: SelectableList) -> None:
    assert genres.view_model is genres.vm
    assert genres.snapshot() is genres.vm.value


def test_track_load_status_marks_success(genres: SelectableList) -> None:
    statuses = []
    genres.status.subscribe(lambda status: statuses.append(status.value.value))

    with genres.track_load_status():
        assert genres.current_status.is_loading

    assert statuses == ["idle", "pending", "success"]


def test_track_load_status_keeps_status_written_inside(genres: SelectableList) -> None:
    with genres.track_load_status():
        genres.update_status(Status.idle())
    assert genres.current_status == Status.idle()


def test_track_load_status_records_error_and_reraises(genres: SelectableList) -> None:
    with pytest.raises(KeyError):
        with genres.track_load_status():
            raise KeyError("genres")

    status = genres.current_status
    assert status.value is LoadStatus.ERROR
    assert isinstance(status.error, KeyError)


@pytest.mark.asyncio
async def test_track_load_status_async_adds_items(genres: SelectableList) -> None:
    async def fetch():
        assert genres.current_status.is_loading
        return GENRES[:2]

    result = await genres.track_load_status_async(fetch())

    assert ids(result) == ["28", "12"]
    assert genres.current_status == Status.success()


@pytest.mark.asyncio
async def test_track_load_status_async_records_failure(genres: SelectableList) -> None:
    async def fetch():
        raise ConnectionError("offline")

    with pytest.raises(ConnectionError):
        await genres.track_load_status_async(fetch())

    assert genres.current_status.value is LoadStatus.ERROR
    assert genres.items == ()


def test_instances_share_no_state() -> None:
    first = SelectableList("first")
    second = SelectableList("second")
    first.add_items(GENRES[:2])
    first.select_all()

    assert second.items == ()
    assert second.selection == ()
    assert second.current_status == Status.idle()


@pytest.mark.asyncio
async def test_cancelled_load_does_not_stay_pending(genres: SelectableList) -> None:
    started = asyncio.Event()

    async def fetch():
        started.set()
        await asyncio.Event().wait()

    task = asyncio.create_task(genres.track_load_status_async(fetch()))
    await started.wait()
    assert genres.current_status.is_loading

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert genres.current_status == Status.idle()
    assert genres.items == ()


def test_interrupt_inside_tracking_keeps_explicit_status(genres: SelectableList) -> None:
    with pytest.raises(KeyboardInterrupt):
        with genres.track_load_status():
            genres.update_status(Status.success())
            raise KeyboardInterrupt

    assert genres.current_status == Status.success()


@pytest.mark.parametrize("bogus", ["loading", 42, {"value": "nope"}])
def test_update_status_drops_unknown_tags(genres: SelectableList, bogus) -> None:
    genres.set_loading(True)
    genres.update_status(bogus)
    assert genres.current_status == Status.pending()
