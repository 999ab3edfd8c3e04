"""
Outcome type returned by the record store.

A plain None can't tell "there is no record" apart from "the database
failed while looking". StoreResult carries that difference explicitly so
callers can choose between retrying and telling the user.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class StoreStatus(Enum):
    FOUND = "found"
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    INVALID_KEY = "invalid_key"  # missing guild/user id, nothing was attempted
    CONFLICT = "conflict"  # insert lost against an existing row
    ERROR = "error"  # storage failure, state unknown


_SUCCESS = {StoreStatus.FOUND, StoreStatus.CREATED, StoreStatus.UPDATED, StoreStatus.DELETED}


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Result of a RecordStore operation."""
    status: StoreStatus
    record: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status in _SUCCESS

    @property
    def unknown(self) -> bool:
        """True when the outcome could not be determined (storage failure)."""
        return self.status is StoreStatus.ERROR

    @property
    def created(self) -> bool:
        return self.status is StoreStatus.CREATED

    @classmethod
    def invalid_key(cls) -> "StoreResult":
        return cls(StoreStatus.INVALID_KEY)

    @classmethod
    def failed(cls, error: Exception) -> "StoreResult":
        return cls(StoreStatus.ERROR, error=error)

    @classmethod
    def conflict(cls, error: Exception) -> "StoreResult":
        return cls(StoreStatus.CONFLICT, error=error)
