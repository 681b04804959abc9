"""Tagged outcome of a cancellable read."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    """Why a read failed."""
    NETWORK = "network"  # transport error, timeout, DNS...
    HTTP = "http"  # non-2xx status
    PARSE = "parse"  # body did not match the expected shape


@dataclass(frozen=True)
class FetchOk(Generic[T]):
    """The read completed and produced a body."""
    body: T


@dataclass(frozen=True)
class FetchCancelled:
    """The read was cancelled before its result was delivered."""


@dataclass(frozen=True)
class FetchFailed:
    """The read failed with a human-readable message."""
    message: str
    kind: FailureKind = FailureKind.NETWORK
    status_code: int | None = None


FetchOutcome = FetchOk[T] | FetchCancelled | FetchFailed
