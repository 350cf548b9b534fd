"""Hierarchical request parameters for 3scale transactions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import Any, NamedTuple, Union

from .exceptions import InvalidInputError, UnknownValueKindError

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ValueKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    MAP = "map"
    ARRAY = "array"


class _Entry(NamedTuple):
    kind: ValueKind
    value: Any


ParameterValue = Union[str, int, "ParameterMap", Sequence["ParameterMap"]]


class ParameterMap:
    """Ordered set of parameters for an authorize, authrep or report call.

    Values may be strings, 64-bit integers, nested ``ParameterMap`` objects or
    sequences of ``ParameterMap`` objects. Insertion order is preserved and
    drives the order of the encoded query string.

    Adding a key that already exists replaces its value in place, whatever
    the previous kind was (last write wins).

    Example::

        params = ParameterMap()
        params.add("app_id", "app_1234")
        usage = ParameterMap()
        usage.add("hits", 3)
        params.add("usage", usage)
        client.authrep(params)
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, _Entry] = {}

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any]) -> ParameterMap:
        """Build a map from plain dicts, lists of dicts and scalars."""

        params = cls()
        for key, value in mapping.items():
            if isinstance(value, Mapping):
                params.add(key, cls.from_dict(value))
            elif isinstance(value, (list, tuple)):
                params.add(
                    key,
                    [cls.from_dict(item) if isinstance(item, Mapping) else item for item in value],
                )
            else:
                params.add(key, value)
        return params

    # Mutation ---------------------------------------------------------------
    def add(self, key: str, value: ParameterValue) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidInputError(f"Parameter keys must be non-empty strings, got {key!r}")
        self._data[key] = self._tag(key, value)

    def set_long_value(self, key: str, value: int) -> None:
        self.add(key, value)

    def update(self, other: ParameterMap) -> None:
        """Add every entry of ``other`` in its order, overwriting shared keys."""

        self._data.update(other._data)

    def copy(self) -> ParameterMap:
        clone = ParameterMap()
        clone._data = dict(self._data)
        return clone

    # Inspection -------------------------------------------------------------
    def keys(self) -> tuple[str, ...]:
        return tuple(self._data)

    def type_of(self, key: str) -> ValueKind:
        entry = self._data[key]
        if not isinstance(entry, _Entry) or not isinstance(entry.kind, ValueKind):
            raise UnknownValueKindError(f"Unknown value kind stored under {key!r}")
        return entry.kind

    def string_value(self, key: str) -> str:
        """Return a string rendering of the value, whatever its kind."""

        kind = self.type_of(key)
        value = self._data[key].value
        if kind is ValueKind.STRING:
            return value
        if kind is ValueKind.INTEGER:
            return str(value)
        if kind is ValueKind.MAP:
            return repr(value)
        if kind is ValueKind.ARRAY:
            return "[" + ", ".join(repr(item) for item in value) + "]"
        raise UnknownValueKindError(f"Unknown value kind stored under {key!r}")

    def map_value(self, key: str) -> ParameterMap:
        return self._typed_value(key, ValueKind.MAP)

    def array_value(self, key: str) -> tuple[ParameterMap, ...]:
        return self._typed_value(key, ValueKind.ARRAY)

    def long_value(self, key: str) -> int:
        return self._typed_value(key, ValueKind.INTEGER)

    def size(self) -> int:
        return len(self._data)

    # Dunder helpers ---------------------------------------------------------
    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterMap):
            return NotImplemented
        return list(self._data.items()) == list(other._data.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rendered = ", ".join(f"{key!r}: {self._debug(key)}" for key in self._data)
        return f"ParameterMap({{{rendered}}})"

    # Internal helpers -------------------------------------------------------
    def _debug(self, key: str) -> str:
        kind = self.type_of(key)
        if kind is ValueKind.STRING:
            return repr(self._data[key].value)
        return self.string_value(key)

    def _typed_value(self, key: str, expected: ValueKind) -> Any:
        kind = self.type_of(key)
        if kind is not expected:
            raise TypeError(f"Parameter {key!r} holds a {kind.value} value, not {expected.value}")
        return self._data[key].value

    @staticmethod
    def _tag(key: str, value: Any) -> _Entry:
        if isinstance(value, str):
            return _Entry(ValueKind.STRING, value)
        if isinstance(value, bool):
            raise InvalidInputError(f"Boolean values are not supported for {key!r}")
        if isinstance(value, int):
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise InvalidInputError(f"Integer value for {key!r} does not fit in 64 bits")
            return _Entry(ValueKind.INTEGER, value)
        if isinstance(value, ParameterMap):
            return _Entry(ValueKind.MAP, value)
        if isinstance(value, (list, tuple)):
            members = tuple(value)
            if not all(isinstance(member, ParameterMap) for member in members):
                raise InvalidInputError(f"Arrays under {key!r} may only hold ParameterMap values")
            return _Entry(ValueKind.ARRAY, members)
        raise InvalidInputError(
            f"Unsupported parameter type {type(value).__name__} for {key!r}"
        )


__all__ = ["ParameterMap", "ValueKind"]
