"""Convert between JSON values and generated model types."""

from __future__ import annotations

import base64
import dataclasses
import datetime
import enum
import types
import typing
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, TypeVar, Union

import httpx

from .errors import DecodingError
from .objects import ApiObject

E = TypeVar("E", bound=enum.Enum)

# Accepted server date formats, tried in order before ISO 8601 parsing.
DATE_FORMATS = ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z")


class Model:
    """Base class of generated models."""

    @classmethod
    def from_json(cls, data: Any):
        return decode(cls, data)

    def to_json(self) -> Any:
        return encode(self)


def enum_value(enum_type: type[E], raw: Optional[int]) -> Optional[E]:
    """Enum member for a raw value, or None when absent or unknown."""
    if raw is None:
        return None
    try:
        return enum_type(raw)
    except ValueError:
        return None


def parse_date(text: str) -> datetime.datetime:
    for fmt in DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise DecodingError(f"Expected an ISO 8601 date, got {text!r}") from None


def format_date(value: Optional[datetime.datetime]) -> Optional[str]:
    """Render ``YYYY-MM-DDTHH:MM:SS+HH:MM`` (``Z`` for UTC). Naive values are local time."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.replace(microsecond=0).isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _is_union(tp: Any) -> bool:
    return typing.get_origin(tp) is Union or isinstance(tp, types.UnionType)


def _decode_dataclass(cls: type, data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise DecodingError(f"{cls.__name__}: expected an object, got {type(data).__name__}")
    hints = typing.get_type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        key = f.metadata.get("json_key", f.name)
        raw = data.get(key)
        if raw is None:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise DecodingError(f"{cls.__name__}: missing required key {key!r}")
            continue
        try:
            kwargs[f.name] = decode(hints[f.name], raw)
        except DecodingError as exc:
            raise DecodingError(f"{cls.__name__}.{key}: {exc}") from exc
    return cls(**kwargs)


def _decode_scalar(tp: type, data: Any) -> Any:
    if tp is bool:
        if isinstance(data, bool):
            return data
    elif tp is int:
        if isinstance(data, int) and not isinstance(data, bool):
            return data
    elif tp is float:
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return float(data)
    elif tp is str:
        if isinstance(data, str):
            return data
    elif tp is Decimal:
        if isinstance(data, (int, float, str)) and not isinstance(data, bool):
            try:
                return Decimal(str(data))
            except InvalidOperation:
                pass
    elif tp is datetime.datetime:
        if isinstance(data, str):
            return parse_date(data)
    elif tp is bytes:
        if isinstance(data, str):
            try:
                return base64.b64decode(data, validate=True)
            except ValueError:
                pass
    else:
        raise DecodingError(f"Unsupported type {tp!r}")
    raise DecodingError(f"Expected {tp.__name__}, got {data!r}")


def decode(tp: Any, data: Any) -> Any:
    """Decode a JSON value into ``tp``."""
    if tp is Any:
        return data

    if _is_union(tp):
        args = typing.get_args(tp)
        if data is None and type(None) in args:
            return None
        candidates = [a for a in args if a is not type(None)]
        if len(candidates) != 1:
            raise DecodingError(f"Unsupported union {tp!r}")
        return decode(candidates[0], data)

    if data is None:
        raise DecodingError(f"Expected {tp!r}, got null")

    if typing.get_origin(tp) is list:
        if not isinstance(data, list):
            raise DecodingError(f"Expected a list, got {type(data).__name__}")
        (item_type,) = typing.get_args(tp) or (Any,)
        return [decode(item_type, item) for item in data]

    if tp is list:
        return decode(list[Any], data)

    if isinstance(tp, type):
        if dataclasses.is_dataclass(tp):
            return _decode_dataclass(tp, data)
        if issubclass(tp, ApiObject):
            try:
                return tp.from_json(data)
            except TypeError as exc:
                raise DecodingError(str(exc)) from exc
        if issubclass(tp, enum.Enum):
            try:
                return tp(data)
            except ValueError:
                raise DecodingError(f"{data!r} is not a valid {tp.__name__}") from None
        return _decode_scalar(tp, data)

    raise DecodingError(f"Unsupported type {tp!r}")


def encode(value: Any) -> Any:
    """Encode a model, enum, container or scalar as a JSON-ready value."""
    if value is None:
        return None
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is not None:
                result[f.metadata.get("json_key", f.name)] = encode(item)
        return result
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, ApiObject):
        return value.to_json()
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, datetime.datetime):
        return format_date(value)
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, Mapping):
        return {str(k): encode(v) for k, v in value.items()}
    raise TypeError(f"Cannot encode {type(value).__name__}")


def _query_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    if isinstance(value, datetime.datetime):
        return format_date(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    return value


def with_query(url: str, args: Mapping[str, Any]) -> str:
    """Append the non-None arguments to url as a query string."""
    params = httpx.QueryParams({
        key: _query_value(value) for key, value in args.items() if value is not None
    })
    query = str(params)
    return f"{url}?{query}" if query else url
