"""Attribute values.

A ``Value`` is a small tagged scalar. ``ABSENT`` stands for "no value",
which is different from an empty string.
"""

from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Kinds of value an attribute can hold."""

    ABSENT = "absent"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"  # tuple of strings


# Separator used when an array value is rendered as a single string
ARRAY_SEPARATOR = ","


def _infer_kind(payload: Any) -> tuple[ValueKind, Any]:
    if payload is None:
        return ValueKind.ABSENT, None
    if isinstance(payload, bool):
        return ValueKind.BOOLEAN, payload
    if isinstance(payload, str):
        return ValueKind.STRING, payload
    if isinstance(payload, (list, tuple)):
        if not all(isinstance(item, str) for item in payload):
            raise TypeError("array values may only contain strings")
        return ValueKind.ARRAY, tuple(payload)
    raise TypeError(f"unsupported value type: {type(payload).__name__}")


class Value:
    """An immutable tagged attribute value."""

    __slots__ = ("_kind", "_payload")

    def __init__(self, payload: Any = None) -> None:
        self._kind, self._payload = _infer_kind(payload)

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """Return ``obj`` if it already is a Value, else wrap it."""
        if isinstance(obj, Value):
            return obj
        return cls(obj)

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def payload(self) -> Any:
        return self._payload

    def is_present(self) -> bool:
        return self._kind is not ValueKind.ABSENT

    def as_type(self, type_: type) -> Any:
        """Return the payload if this value holds a ``type_``, else None.

        Args:
            type_: One of ``str``, ``bool``, ``tuple`` or ``list`` (arrays)

        Returns:
            The payload, or None if the active kind does not match
        """
        expected = {
            str: ValueKind.STRING,
            bool: ValueKind.BOOLEAN,
            tuple: ValueKind.ARRAY,
            list: ValueKind.ARRAY,
        }.get(type_)
        if expected is None or expected is not self._kind:
            return None
        return self._payload

    def to_string(self) -> str:
        """Canonical textual form of the value."""
        if self._kind is ValueKind.ABSENT:
            return ""
        if self._kind is ValueKind.BOOLEAN:
            return "true" if self._payload else "false"
        if self._kind is ValueKind.ARRAY:
            return ARRAY_SEPARATOR.join(self._payload)
        return self._payload

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        if self._kind is ValueKind.ABSENT:
            return "Value()"
        return f"Value({self._payload!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._kind is other._kind and self._payload == other._payload

    def __hash__(self) -> int:
        return hash((self._kind, self._payload))


ABSENT = Value()
