import pytest
from pydantic import ValidationError

from selectkit.state import LoadStatus, Status


def test_default_status_is_idle() -> None:
    assert Status() == Status.idle()
    assert Status().value == "idle"
    assert Status().error is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("pending", Status.pending()),
        (LoadStatus.SUCCESS, Status.success()),
        ({"value": "error", "error": "timeout"}, Status.failure("timeout")),
    ],
)
def test_coerce(raw, expected) -> None:
    assert Status.coerce(raw) == expected


def test_coerce_returns_status_unchanged() -> None:
    status = Status.failure("x")
    assert Status.coerce(status) is status


def test_unknown_tag_is_rejected() -> None:
    with pytest.raises(ValueError):
        Status.coerce("loading")
    with pytest.raises(ValidationError):
        Status(value="loading")


def test_status_is_frozen() -> None:
    with pytest.raises(ValidationError):
        Status().value = LoadStatus.PENDING


def test_to_payload_renders_exceptions() -> None:
    assert Status.idle().to_payload() == {"value": "idle"}
    assert Status.failure(TimeoutError("slow")).to_payload() == {
        "value": "error",
        "error": "TimeoutError: slow",
    }
