"""Finding and loading provider scripts.

Provider scripts live in the ``providers/`` subdirectory of each data
directory. A script describes itself when run with ``ral_action=describe``
by printing YAML metadata; only scripts whose metadata says
``invoke: json`` are loaded as ``ScriptProvider``.
"""

import os
from collections.abc import Iterable
from pathlib import Path

import yaml

from ral.constants import PROVIDERS_SUBDIR
from ral.core.result import Error, Result
from ral.execution import execute
from ral.providers.protocol import Action, transport_error
from ral.providers.script import Executor, ScriptProvider

JSON_INVOKE = "json"


def provider_dirs(data_dirs: Iterable[Path]) -> list[Path]:
    """Directories provider scripts are searched in."""
    return [Path(d) / PROVIDERS_SUBDIR for d in data_dirs]


def _is_script(path: Path) -> bool:
    if path.name.startswith(".") or path.suffix in (".yaml", ".yml", ".md"):
        return False
    return path.is_file() and os.access(path, os.X_OK)


def discover_scripts(data_dirs: Iterable[Path]) -> list[Path]:
    """Find provider scripts in the given data directories.

    Args:
        data_dirs: Data directories, searched in order

    Returns:
        Executable files, sorted by name within each directory
    """
    scripts = []
    for directory in provider_dirs(data_dirs):
        if not directory.is_dir():
            continue
        scripts.extend(sorted(p for p in directory.iterdir() if _is_script(p)))
    return scripts


def load_script_provider(
    path: Path,
    *,
    timeout: float | None = None,
    executor: Executor = execute,
) -> Result[ScriptProvider]:
    """Run a script's describe action and build a provider from it.

    Args:
        path: Provider script
        timeout: Seconds to wait for each script run
        executor: Function used to run the script

    Returns:
        Result with the provider, or an error naming the script
    """
    res = executor(path, [Action.DESCRIBE.as_arg()], "",
                   merge_environment=True, trim_output=True, timeout=timeout)
    error = transport_error(Action.DESCRIBE, res)
    if error is not None:
        return Result(Error(f"provider {path}: {error.detail}"))

    try:
        metadata = yaml.safe_load(res.output)
    except yaml.YAMLError as e:
        return Result(Error(f"provider {path}: metadata is not valid YAML: {e}"))

    if not isinstance(metadata, dict) or not isinstance(metadata.get("provider"), dict):
        return Result(Error(
            f"provider {path}: expected 'provider' key in metadata to contain a map"
        ))

    invoke = metadata["provider"].get("invoke")
    if invoke != JSON_INVOKE:
        return Result(Error(
            f"provider {path}: invoke '{invoke}' is not supported, expected '{JSON_INVOKE}'"
        ))

    return Result(ScriptProvider(path, metadata, timeout=timeout, executor=executor))
