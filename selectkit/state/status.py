"""Load status of a selectable list."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


class LoadStatus(str, Enum):
    """Status tags. There is no transition table; any tag may follow any other."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class Status(BaseModel):
    """Tagged status value, with an optional error payload for ``error``.

    The payload is caller data and is stored without interpretation.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: LoadStatus = LoadStatus.IDLE
    error: Optional[Any] = None

    @classmethod
    def idle(cls) -> "Status":
        return cls(value=LoadStatus.IDLE)

    @classmethod
    def pending(cls) -> "Status":
        return cls(value=LoadStatus.PENDING)

    @classmethod
    def success(cls) -> "Status":
        return cls(value=LoadStatus.SUCCESS)

    @classmethod
    def failure(cls, error: Any = None) -> "Status":
        return cls(value=LoadStatus.ERROR, error=error)

    @classmethod
    def coerce(cls, status: Union["Status", LoadStatus, str, Dict[str, Any]]) -> "Status":
        """Build a Status from a Status, a LoadStatus, a tag string or a mapping."""
        if isinstance(status, Status):
            return status
        if isinstance(status, dict):
            return cls(**status)
        return cls(value=LoadStatus(status))

    @property
    def is_loading(self) -> bool:
        return self.value is LoadStatus.PENDING

    def to_payload(self) -> Dict[str, Any]:
        """Plain-dict form for event payloads; exceptions are rendered as text."""
        payload: Dict[str, Any] = {"value": self.value.value}
        if self.error is not None:
            error = self.error
            if isinstance(error, BaseException):
                error = f"{error.__class__.__name__}: {error}"
            payload["error"] = error
        return payload
