"""Core abstractions for ral.

- Result, Error, Unimplemented: return type of fallible operations
- Value, ValueKind, ABSENT: tagged attribute values
- AttrMap, Change, ChangeList: attribute maps and diffs between them
- Resource: a named entity owned by a provider
- ProviderSpec, AttrSpec, AttrType: the attribute schema of a provider
- Provider: base class for providers
- ProviderRegistry: owner of the loaded providers
"""

from ral.core.attributes import AttrMap, Change, ChangeList
from ral.core.provider import Provider
from ral.core.registry import ProviderRegistry
from ral.core.resource import Resource
from ral.core.result import Error, Result, Unimplemented
from ral.core.spec import AttrAccess, AttrSpec, AttrType, ProviderSpec
from ral.core.value import ABSENT, Value, ValueKind

__all__ = [
    # Results
    "Result",
    "Error",
    "Unimplemented",
    # Values and attributes
    "Value",
    "ValueKind",
    "ABSENT",
    "AttrMap",
    "Change",
    "ChangeList",
    # Resources and providers
    "Resource",
    "Provider",
    "ProviderRegistry",
    # Schema
    "ProviderSpec",
    "AttrSpec",
    "AttrType",
    "AttrAccess",
]
