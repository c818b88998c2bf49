"""Providers backed by external scripts.

Public exports:
- ScriptProvider: provider that runs a script speaking JSON
- ScriptResource: resource handed out by a ScriptProvider
- Action, ErrorKind, ProviderError: protocol types
- discover_scripts, load_script_provider: finding and loading scripts
"""

from ral.providers.loader import discover_scripts, load_script_provider
from ral.providers.protocol import Action, ErrorKind, ProviderError
from ral.providers.script import ListError, ScriptProvider, ScriptResource

__all__ = [
    "ScriptProvider",
    "ScriptResource",
    "ListError",
    "Action",
    "ErrorKind",
    "ProviderError",
    "discover_scripts",
    "load_script_provider",
]
