"""The JSON protocol spoken with provider scripts.

A provider script is run as ``<script> ral_action=<action>`` with a JSON
request on stdin and answers with a JSON document on stdout:

| Field path          | Direction       | Meaning                              |
|---------------------|-----------------|--------------------------------------|
| `ral.noop`          | request (update)| always false                         |
| `resource.name`     | request         | name of the target resource          |
| `resource.<attr>`   | request (update)| desired value, as a string           |
| `error.message`     | response        | failure detail                       |
| `error.kind`        | response        | "unknown" (not found) or other       |
| `changes.<attr>`    | response (update)| `{"is": ..., "was": ...}`           |
| `resource`          | response (find) | attributes plus `name`               |
| `resources`         | response (list) | list of resource objects             |

Scripts must exit 0 and keep stderr empty; anything on stderr is treated as
a failure.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any

from ral.constants import ACTION_ARG
from ral.core.result import Error
from ral.execution import ExecutionResult


class Action(Enum):
    """Actions a provider script can be asked to perform."""

    UPDATE = "update"
    FIND = "find"
    LIST = "list"
    DESCRIBE = "describe"  # metadata, only used when loading a provider

    def as_arg(self) -> str:
        return f"{ACTION_ARG}={self.value}"


class ErrorKind(Enum):
    """Kinds of error a provider script can report."""

    NOT_FOUND = "unknown"
    FAILED = "failed"
    OTHER = "other"

    @classmethod
    def parse(cls, text: str) -> "ErrorKind":
        if text == cls.NOT_FOUND.value:
            return cls.NOT_FOUND
        if text == cls.FAILED.value:
            return cls.FAILED
        return cls.OTHER


class ProviderError(Error):
    """An error reported by the provider script in its response."""

    __slots__ = ("_kind_name",)

    def __init__(self, detail: str, kind_name: str = ErrorKind.FAILED.value) -> None:
        super().__init__(detail)
        self._kind_name = kind_name

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.parse(self._kind_name)

    @property
    def kind_name(self) -> str:
        """The kind exactly as the script reported it."""
        return self._kind_name

    @property
    def is_not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND

    def __repr__(self) -> str:
        return f"ProviderError({self.detail!r}, kind_name={self._kind_name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProviderError):
            return NotImplemented
        return self.detail == other.detail and self._kind_name == other._kind_name

    def __hash__(self) -> int:
        return hash((ProviderError, self.detail, self._kind_name))


def set_path(document: dict[str, Any], path: Sequence[str], value: Any) -> None:
    """Set ``value`` at a nested key path, creating maps as needed."""
    node = document
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = node[key] = {}
        node = child
    node[path[-1]] = value


def get_path(document: Any, path: Sequence[str], default: Any = None) -> Any:
    """Get the value at a nested key path, or ``default``."""
    node = document
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def includes(document: Any, path: Sequence[str]) -> bool:
    """Check if a nested key path exists."""
    sentinel = object()
    return get_path(document, path, sentinel) is not sentinel


def contains_error(document: dict[str, Any]) -> ProviderError | None:
    """Extract the error a script reported, if any.

    A response failed iff it has an ``error`` key. The message defaults to
    an empty string and the kind to ``failed``.
    """
    if "error" not in document:
        return None
    message = get_path(document, ("error", "message"), "")
    kind = get_path(document, ("error", "kind"), ErrorKind.FAILED.value)
    return ProviderError(str(message), str(kind))


def transport_error(action: Action, res: ExecutionResult) -> Error | None:
    """Classify the way a script run failed, if it did.

    A non-zero exit always fails; a zero exit fails if anything was
    written to stderr.
    """
    name = action.value
    if not res.success:
        if not res.output:
            if not res.error:
                return Error(f"action '{name}' exited with status {res.exit_code}")
            return Error(
                f"action '{name}' exited with status {res.exit_code}. "
                f"stderr was '{res.error}'"
            )
        if not res.error:
            return Error(
                f"action '{name}' exited with status {res.exit_code}. "
                f"Output was '{res.output}'"
            )
        return Error(
            f"action '{name}' exited with status {res.exit_code}. "
            f"Output was '{res.output}'. stderr was '{res.error}'"
        )
    if res.error:
        return Error(f"action '{name}' produced stderr '{res.error}'")
    return None
