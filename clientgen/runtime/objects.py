"""Open-ended JSON object that keeps every key, known or not.

Values are held as a closed set of tagged variants. Decoding tries the
candidate shapes in a fixed order (string, boolean, integer, float, object,
list) and keeps the first that matches; encoding dispatches on the variant.
Keys whose values fit none of the shapes (``null``, nested lists, mixed
lists) are dropped on decode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class IntValue:
    value: int


@dataclass(frozen=True)
class FloatValue:
    value: float


@dataclass(frozen=True)
class ObjectValue:
    value: ApiObject


@dataclass(frozen=True)
class ObjectListValue:
    value: tuple[ApiObject, ...]


@dataclass(frozen=True)
class ListValue:
    """Homogeneous list of one primitive variant."""

    value: tuple[Union[StringValue, BoolValue, IntValue, FloatValue], ...]


Value = Union[
    StringValue, BoolValue, IntValue, FloatValue, ObjectValue, ObjectListValue, ListValue,
]


def _as_string(raw: Any) -> Optional[StringValue]:
    return StringValue(raw) if isinstance(raw, str) else None


def _as_bool(raw: Any) -> Optional[BoolValue]:
    return BoolValue(raw) if isinstance(raw, bool) else None


def _as_int(raw: Any) -> Optional[IntValue]:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return IntValue(raw)
    return None


def _as_float(raw: Any) -> Optional[FloatValue]:
    if isinstance(raw, float):
        return FloatValue(raw)
    return None


def _as_object(raw: Any, lenient: bool = False) -> Optional[ObjectValue]:
    if isinstance(raw, ApiObject):
        return ObjectValue(raw)
    if isinstance(raw, Mapping):
        return ObjectValue(ApiObject.from_json(raw) if lenient else ApiObject(raw))
    return None


_PRIMITIVE_DECODERS: tuple[Callable[[Any], Any], ...] = (
    _as_string, _as_bool, _as_int, _as_float,
)


def _as_list(raw: Any, lenient: bool = False) -> Optional[Union[ListValue, ObjectListValue]]:
    if not isinstance(raw, (list, tuple)):
        return None
    for decoder in _PRIMITIVE_DECODERS:
        items = [decoder(item) for item in raw]
        if all(item is not None for item in items):
            return ListValue(tuple(items))
    objects = [_as_object(item, lenient) for item in raw]
    if all(item is not None for item in objects):
        return ObjectListValue(tuple(item.value for item in objects))
    return None


def tag(raw: Any, lenient: bool = False) -> Optional[Value]:
    """Wrap a plain value in the first matching variant, or return None.

    With ``lenient`` set, nested objects drop unsupported keys instead of
    raising ``TypeError``.
    """
    for decoder in _PRIMITIVE_DECODERS:
        value = decoder(raw)
        if value is not None:
            return value
    value = _as_object(raw, lenient)
    if value is not None:
        return value
    return _as_list(raw, lenient)


def untag(value: Value) -> Any:
    """Plain Python representation of a tagged value."""
    if isinstance(value, ObjectValue):
        return value.value.info
    if isinstance(value, ObjectListValue):
        return [item.info for item in value.value]
    if isinstance(value, ListValue):
        return [item.value for item in value.value]
    return value.value


def encode_value(value: Value) -> Any:
    """JSON-ready representation of a tagged value."""
    if isinstance(value, (StringValue, BoolValue, IntValue, FloatValue)):
        return value.value
    if isinstance(value, ObjectValue):
        return value.value.to_json()
    if isinstance(value, ObjectListValue):
        return [item.to_json() for item in value.value]
    if isinstance(value, ListValue):
        return [item.value for item in value.value]
    raise TypeError(f"Unsupported value variant: {value!r}")


class ApiObject:
    """Mapping of string keys to tagged JSON values."""

    def __init__(self, info: Optional[Mapping[str, Any]] = None) -> None:
        self._values: dict[str, Value] = {}
        for key, raw in (info or {}).items():
            value = tag(raw)
            if value is None:
                raise TypeError(f"Unsupported value for key {key!r}: {raw!r}")
            self._values[str(key)] = value

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> ApiObject:
        """Decode a JSON object, dropping keys with unsupported shapes."""
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        obj = cls()
        for key, raw in data.items():
            value = tag(raw, lenient=True)
            if value is None:
                logger.debug("Dropping key %r with unsupported value %r", key, raw)
                continue
            obj._values[key] = value
        return obj

    def to_json(self) -> dict[str, Any]:
        return {key: encode_value(value) for key, value in self._values.items()}

    @property
    def info(self) -> dict[str, Any]:
        """Plain nested dict/list representation."""
        return {key: untag(value) for key, value in self._values.items()}

    @property
    def values(self) -> Mapping[str, Value]:
        """Tagged values by key."""
        return dict(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        value = self._values.get(key)
        return default if value is None else untag(value)

    def __getitem__(self, key: str) -> Any:
        return untag(self._values[key])

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiObject):
            return NotImplemented
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ApiObject({self.info!r})"
