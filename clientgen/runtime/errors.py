"""Errors reported by the runtime client, and the tagged request outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ApiError(Exception):
    """Base class for request failures delivered through ``Failure``."""


class TransportError(ApiError):
    """The request could not be completed."""


class HTTPStatusError(TransportError):
    """The server answered with a non-success status other than 401."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}")


class RequestCancelledError(TransportError):
    """The request was aborted by ``ApiClient.cancel_all``."""


class EmptyPayloadError(ApiError):
    """The response carried no body."""


class NotAStringError(ApiError):
    """A string result was not delivered as a quoted payload."""


class DecodingError(ApiError):
    """The payload does not match the expected result type."""


class MockError(ApiError):
    """A mock payload requested a failure."""


class NotAuthorizedError(ApiError):
    """Raised by ``Unauthorized.unwrap``; never delivered through ``Failure``."""


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: ApiError
    ok = False

    def unwrap(self):
        raise self.error


@dataclass(frozen=True)
class Unauthorized:
    """The server answered 401. Observers were notified separately."""

    status_code: int = 401
    ok = False

    def unwrap(self):
        raise NotAuthorizedError(f"HTTP {self.status_code}")


Outcome = Union[Success[T], Failure, Unauthorized]
