"""Provider base class.

A provider knows how to discover and change resources of one type on the
current host. There is one provider instance per resource type; the
resources it hands out keep a weak reference back to it.
"""

import threading
from abc import ABC, abstractmethod

from ral.core.resource import Resource
from ral.core.result import Error, Result
from ral.core.spec import ProviderSpec
from ral.core.value import Value


class Provider(ABC):
    """Base class for providers.

    Subclasses implement ``describe``, ``suitable``, ``instances`` and
    ``create``. Call ``prepare`` before ``parse``; it loads the attribute
    spec once and keeps it.
    """

    def __init__(self) -> None:
        self._spec: ProviderSpec | None = None
        self._prepare_lock = threading.Lock()

    @property
    def spec(self) -> ProviderSpec | None:
        """The cached attribute spec, or None before ``prepare``."""
        return self._spec

    @property
    def source(self) -> str:
        """Where this provider comes from."""
        return "builtin"

    @property
    def name(self) -> str:
        return type(self).__name__.lower()

    @property
    def qualified_name(self) -> str:
        """``<resource type>::<provider name>``, or just the name before ``prepare``."""
        if self._spec is None:
            return self.name
        return f"{self._spec.type_name}::{self.name}"

    @abstractmethod
    def describe(self) -> Result[ProviderSpec]:
        """Return this provider's attribute spec."""

    @abstractmethod
    def suitable(self) -> Result[bool]:
        """Whether this provider can be used on this host."""

    @abstractmethod
    def instances(self) -> list[Resource]:
        """All resources of this type currently on the host."""

    @abstractmethod
    def create(self, name: str) -> Resource:
        """Create an empty resource bound to this provider.

        This only builds the in-memory handle; host state is untouched.
        """

    def find(self, name: str) -> Resource | None:
        """Find a resource by name.

        The default scans ``instances()``. Returns None both when the
        resource does not exist and when the lookup failed.
        """
        for inst in self.instances():
            if inst.name == name:
                return inst
        return None

    def flush(self) -> None:
        """Write out batched changes. Nothing to do by default."""

    def parse(self, name: str, text: str) -> Result[Value]:
        """Convert ``text`` into a value for attribute ``name``.

        Args:
            name: Attribute name
            text: Raw string, e.g. from the command line

        Returns:
            Result with the typed value
        """
        if self._spec is None:
            return Result(Error("internal error: spec was not initialized"))
        attr_spec = self._spec.attr(name)
        if attr_spec is None:
            return Result(Error(f"there is no attribute '{name}'"))
        return attr_spec.read_string(text)

    def prepare(self) -> Result[bool]:
        """Load and cache the attribute spec.

        Safe to call repeatedly and from several threads; ``describe`` runs
        until it succeeds once. A describe error is returned unchanged.
        """
        if self._spec is not None:
            return Result(True)
        with self._prepare_lock:
            if self._spec is None:
                res = self.describe()
                if not res:
                    return Result(res.err())
                self._spec = res.unwrap()
        return Result(True)
