"""Runtime support imported by generated code."""

from .client import ApiClient, ClientConfig, parse_response
from .codec import Model, decode, encode, enum_value, format_date, parse_date, with_query
from .errors import (
    ApiError,
    DecodingError,
    EmptyPayloadError,
    Failure,
    HTTPStatusError,
    MockError,
    NotAStringError,
    NotAuthorizedError,
    Outcome,
    RequestCancelledError,
    Success,
    TransportError,
    Unauthorized,
)
from .notifications import NOT_AUTHORIZED, NotificationCenter, default_center
from .objects import ApiObject

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiObject",
    "ClientConfig",
    "DecodingError",
    "EmptyPayloadError",
    "Failure",
    "HTTPStatusError",
    "MockError",
    "Model",
    "NOT_AUTHORIZED",
    "NotAStringError",
    "NotAuthorizedError",
    "NotificationCenter",
    "Outcome",
    "RequestCancelledError",
    "Success",
    "TransportError",
    "Unauthorized",
    "decode",
    "default_center",
    "encode",
    "enum_value",
    "format_date",
    "parse_date",
    "parse_response",
    "with_query",
]
