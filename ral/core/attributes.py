"""Attribute maps and the changes computed between them."""

from collections import UserDict
from dataclasses import dataclass
from typing import Any

from ral.core.value import ABSENT, Value


class AttrMap(UserDict):
    """Mapping from attribute name to ``Value``.

    Looking up a missing key returns ``ABSENT`` without inserting it.
    Plain Python values are wrapped in a ``Value`` on assignment.
    """

    def __missing__(self, key: str) -> Value:
        return ABSENT

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = Value.of(value)

    def lookup(self, key: str, type_: type, default: Any = None) -> Any:
        """Look up the typed payload of an attribute.

        Args:
            key: Attribute name
            type_: Expected payload type (``str``, ``bool``, ``tuple``)
            default: Returned when the key is missing or of another kind

        Returns:
            The payload or ``default``
        """
        if key not in self.data:
            return default
        payload = self.data[key].as_type(type_)
        return default if payload is None else payload


@dataclass(frozen=True)
class Change:
    """A single attribute change.

    ``is_value`` is the new (or desired) value, ``was_value`` the value
    the attribute had before.
    """

    attr: str
    is_value: Value
    was_value: Value

    def __str__(self) -> str:
        return f"{self.attr}({self.was_value.to_string()}->{self.is_value.to_string()})"


class ChangeList(list):
    """Ordered, append-only list of changes."""

    def add(self, attr: str, is_value: Any, was_value: Any) -> None:
        self.append(Change(attr, Value.of(is_value), Value.of(was_value)))

    def exists(self, attr: str) -> bool:
        for change in self:
            if change.attr == attr:
                return True
        return False

    def __str__(self) -> str:
        return "".join(f"{change}\n" for change in self)
