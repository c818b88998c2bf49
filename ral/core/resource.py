"""Resources: named entities with attributes, bound to a provider."""

import weakref
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ral.constants import NAME_ATTR
from ral.core.attributes import AttrMap, ChangeList
from ral.core.result import Result, Unimplemented
from ral.core.value import Value
from ral.exceptions import InvalidAttributeError

if TYPE_CHECKING:
    from ral.core.provider import Provider


def is_name(key: str) -> bool:
    """Check if ``key`` is the attribute that identifies a resource."""
    return key == NAME_ATTR


def _reject_name(key: str) -> None:
    if is_name(key):
        raise InvalidAttributeError(
            f"The {NAME_ATTR} can not be accessed as an attribute"
        )


class Resource:
    """A resource of some type as seen by its provider.

    The name is fixed at construction. Attributes are read and written with
    ``resource[attr]``; the name is not an attribute and accessing it that
    way raises ``InvalidAttributeError``.

    Resources hold a weak reference to their provider. The provider
    registry owns providers, so ``provider`` only becomes None if a
    resource outlives the registry entry it came from.
    """

    def __init__(self, provider: "Provider", name: str) -> None:
        self._provider_ref = weakref.ref(provider)
        self._name = name
        self._attrs = AttrMap()

    @property
    def name(self) -> str:
        return self._name

    @property
    def provider(self) -> "Provider | None":
        return self._provider_ref()

    @property
    def attrs(self) -> Mapping[str, Value]:
        """Read-only view of the attributes."""
        return self._attrs.data.copy()

    def __getitem__(self, key: str) -> Value:
        _reject_name(key)
        return self._attrs[key]

    def __setitem__(self, key: str, value: Any) -> None:
        _reject_name(key)
        self._attrs[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._attrs

    def lookup(self, key: str, type_: type, default: Any = None) -> Any:
        return self._attrs.lookup(key, type_, default)

    def check(
        self, changes: ChangeList, should: AttrMap, props: Iterable[str]
    ) -> None:
        """Record a change for each property ``should`` wants different.

        Only properties with a present value in ``should`` are compared.

        Args:
            changes: List the changes are appended to
            should: Desired attribute values
            props: Property names to compare, in report order
        """
        for prop in props:
            desired = should[prop]
            if desired.is_present() and self[prop] != desired:
                changes.add(prop, desired, self[prop])

    def update(self, should: AttrMap) -> Result[ChangeList]:
        """Bring the resource into the state described by ``should``.

        Returns:
            Result with the changes that were made
        """
        return Result(Unimplemented())

    def to_dict(self) -> dict[str, str]:
        """Name and present attributes as strings, for display."""
        result = {NAME_ATTR: self._name}
        for key, value in self._attrs.items():
            if value.is_present():
                result[key] = value.to_string()
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
