"""Attribute schema a provider declares for its resource type.

The schema comes from provider metadata, a YAML document such as:

    provider:
      type: user
      invoke: json
      actions: [list, find, update]
      suitable: true
      attributes:
        name:
          desc: the user name
        shell:
          type: string
        ensure:
          type: enum[present, absent]
        groups:
          type: array[string]
          kind: rw
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ral.constants import NAME_ATTR
from ral.core.result import Error, Result
from ral.core.value import ARRAY_SEPARATOR, Value

_TYPE_PATTERN = re.compile(r"^\s*(\w+)\s*(?:\[(.*)\])?\s*$")


class AttrAccess(Enum):
    """Whether an attribute can be read, written, or both."""

    READ = "r"
    WRITE = "w"
    READ_WRITE = "rw"


class BaseType(Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"


@dataclass(frozen=True)
class AttrType:
    """Type of an attribute, e.g. ``string`` or ``enum[present, absent]``."""

    base: BaseType
    options: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Result["AttrType"]:
        """Parse a type expression from metadata.

        Args:
            text: Type expression such as ``boolean`` or ``array[string]``

        Returns:
            Result with the parsed type
        """
        match = _TYPE_PATTERN.match(text)
        if not match:
            return Result(Error(f"invalid type '{text}'"))

        base_name, args = match.group(1), match.group(2)
        try:
            base = BaseType(base_name)
        except ValueError:
            return Result(Error(f"unknown type '{base_name}'"))

        if base is BaseType.ENUM:
            options = tuple(o.strip() for o in (args or "").split(",") if o.strip())
            if not options:
                return Result(Error(f"enum type '{text}' has no values"))
            return Result(cls(base, options))

        if base is BaseType.ARRAY:
            if args is None or args.strip() != "string":
                return Result(Error(f"only array[string] is supported, not '{text}'"))
            return Result(cls(base))

        if args is not None:
            return Result(Error(f"type '{base_name}' does not take arguments"))
        return Result(cls(base))

    def __str__(self) -> str:
        if self.base is BaseType.ENUM:
            return f"enum[{', '.join(self.options)}]"
        if self.base is BaseType.ARRAY:
            return "array[string]"
        return self.base.value


STRING_TYPE = AttrType(BaseType.STRING)


@dataclass(frozen=True)
class AttrSpec:
    """Schema entry for a single attribute."""

    name: str
    type: AttrType = STRING_TYPE
    desc: str = ""
    access: AttrAccess = AttrAccess.READ_WRITE
    namevar: bool = False

    def read_string(self, text: str) -> Result[Value]:
        """Convert raw text into a Value of this attribute's type."""
        base = self.type.base
        if base is BaseType.BOOLEAN:
            if text == "true":
                return Result(Value(True))
            if text == "false":
                return Result(Value(False))
            return Result(Error(
                f"attribute '{self.name}': expected 'true' or 'false' but got '{text}'"
            ))
        if base is BaseType.ENUM:
            if text not in self.type.options:
                return Result(Error(
                    f"attribute '{self.name}': '{text}' is not one of "
                    f"{', '.join(self.type.options)}"
                ))
            return Result(Value(text))
        if base is BaseType.ARRAY:
            items = [item.strip() for item in text.split(ARRAY_SEPARATOR)]
            return Result(Value([item for item in items if item]))
        return Result(Value(text))

    @classmethod
    def read(cls, name: str, data: Any) -> Result["AttrSpec"]:
        """Build an attribute spec from its metadata entry."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return Result(Error(f"attribute '{name}' must be a map"))

        type_res = AttrType.parse(str(data.get("type", "string")))
        if not type_res:
            return Result(Error(f"attribute '{name}': {type_res.err().detail}"))

        kind = str(data.get("kind", AttrAccess.READ_WRITE.value))
        try:
            access = AttrAccess(kind)
        except ValueError:
            return Result(Error(
                f"attribute '{name}': kind must be one of r, w, rw but was '{kind}'"
            ))

        return Result(cls(
            name=name,
            type=type_res.unwrap(),
            desc=str(data.get("desc", "")),
            access=access,
            namevar=(name == NAME_ATTR),
        ))


@dataclass(frozen=True)
class ProviderSpec:
    """Schema for one provider: its resource type and attributes."""

    type_name: str
    desc: str = ""
    attrs: dict[str, AttrSpec] = field(default_factory=dict)

    def attr(self, name: str) -> AttrSpec | None:
        return self.attrs.get(name)

    @property
    def properties(self) -> list[str]:
        """Attribute names other than the name, in declaration order."""
        return [name for name in self.attrs if name != NAME_ATTR]

    @classmethod
    def read(cls, source: Any, metadata: Any) -> Result["ProviderSpec"]:
        """Read a provider spec from parsed metadata.

        Args:
            source: Where the metadata came from, used in messages
            metadata: Parsed metadata document

        Returns:
            Result with the provider spec
        """
        if not isinstance(metadata, dict) or not isinstance(metadata.get("provider"), dict):
            return Result(Error(
                f"provider {source}: expected 'provider' key in metadata to contain a map"
            ))
        meta = metadata["provider"]

        type_name = meta.get("type")
        if not type_name or not isinstance(type_name, str):
            return Result(Error(f"provider {source}: metadata must contain a 'type'"))

        attributes = meta.get("attributes") or {}
        if not isinstance(attributes, dict):
            return Result(Error(f"provider {source}: 'attributes' must be a map"))

        attrs: dict[str, AttrSpec] = {}
        if NAME_ATTR not in attributes:
            attrs[NAME_ATTR] = AttrSpec(name=NAME_ATTR, namevar=True)
        for attr_name, attr_data in attributes.items():
            attr_res = AttrSpec.read(str(attr_name), attr_data)
            if not attr_res:
                return Result(Error(f"provider {source}: {attr_res.err().detail}"))
            attrs[str(attr_name)] = attr_res.unwrap()

        return Result(cls(
            type_name=type_name,
            desc=str(meta.get("desc", "")),
            attrs=attrs,
        ))
