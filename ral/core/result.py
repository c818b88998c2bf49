"""Result type used by every fallible operation.

Providers never raise for recoverable failures. They return a ``Result``
that holds either the value the caller asked for or an ``Error`` describing
what went wrong, and the caller has to look before it reads:

    res = provider.describe()
    if not res:
        return res.err()
    spec = res.unwrap()

Reading the success payload of an error result is a bug in the caller and
raises ``ResultContractError``.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from ral.exceptions import ResultContractError

T = TypeVar("T")


class Error:
    """A recoverable failure with a human-readable detail message."""

    __slots__ = ("_detail",)

    def __init__(self, detail: str) -> None:
        self._detail = detail

    @property
    def detail(self) -> str:
        return self._detail

    def __str__(self) -> str:
        return self._detail

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._detail!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Error):
            return NotImplemented
        return type(self) is type(other) and self._detail == other._detail

    def __hash__(self) -> int:
        return hash((type(self), self._detail))


class Unimplemented(Error):
    """Indication that an operation is not implemented."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("not implemented")


class _Tag(Enum):
    OK = "ok"
    ERR = "err"


class Result(Generic[T]):
    """Either a success value or an ``Error``, never both.

    Constructing from an ``Error`` gives an error result, anything else a
    success result. Use ``Result.success`` to store an ``Error`` instance as
    a success value, should that ever be needed.
    """

    __slots__ = ("_tag", "_payload")

    def __init__(self, value: "T | Error") -> None:
        if isinstance(value, Error):
            self._set(_Tag.ERR, value)
        else:
            self._set(_Tag.OK, value)

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        """Build a success result, even if ``value`` is an ``Error``."""
        res = cls.__new__(cls)
        res._set(_Tag.OK, value)
        return res

    @classmethod
    def failure(cls, error: "Error | str") -> "Result[Any]":
        """Build an error result from an ``Error`` or a message."""
        if not isinstance(error, Error):
            error = Error(error)
        res = cls.__new__(cls)
        res._set(_Tag.ERR, error)
        return res

    def _set(self, tag: _Tag, payload: Any) -> None:
        # Tag and payload always change together
        self._tag = tag
        self._payload = payload

    def is_ok(self) -> bool:
        return self._tag is _Tag.OK

    def is_err(self) -> bool:
        return self._tag is _Tag.ERR

    def __bool__(self) -> bool:
        return self.is_ok()

    def ok(self) -> T | None:
        """Return the success payload, or None for an error result."""
        return self._payload if self.is_ok() else None

    def err(self) -> Error | None:
        """Return the error, or None for a success result."""
        return self._payload if self.is_err() else None

    def unwrap(self) -> T:
        """Return the success payload.

        Raises:
            ResultContractError: If this result holds an error
        """
        if not self.is_ok():
            raise ResultContractError(
                f"unwrap() called on an error result: {self._payload.detail}"
            )
        return self._payload

    @property
    def value(self) -> T:
        return self.unwrap()

    def unwrap_err(self) -> Error:
        """Return the error.

        Raises:
            ResultContractError: If this result holds a success value
        """
        if not self.is_err():
            raise ResultContractError("unwrap_err() called on a success result")
        return self._payload

    def unwrap_or(self, default: T) -> T:
        return self._payload if self.is_ok() else default

    def assign(self, other: "Result[T] | Error | T") -> "Result[T]":
        """Replace the live payload and return self.

        ``other`` may be another result, a bare error or a success value.
        """
        if other is self:
            return self
        if isinstance(other, Result):
            self._set(other._tag, other._payload)
        elif isinstance(other, Error):
            self._set(_Tag.ERR, other)
        else:
            self._set(_Tag.OK, other)
        return self

    def __copy__(self) -> "Result[T]":
        res = type(self).__new__(type(self))
        res._set(self._tag, self._payload)
        return res

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._tag is other._tag and self._payload == other._payload

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Result.success({self._payload!r})"
        return f"Result.failure({self._payload!r})"
