"""Providers implemented by external scripts speaking JSON.

Every provider call turns into one run of the script with one of the
actions in ``ral.providers.protocol.Action``. See that module for the
shape of requests and responses.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

from ral.constants import NAME_ATTR
from ral.core.attributes import AttrMap, ChangeList
from ral.core.provider import Provider
from ral.core.resource import Resource
from ral.core.result import Error, Result
from ral.core.spec import ProviderSpec
from ral.core.value import Value
from ral.execution import ExecutionResult, execute
from ral.providers.protocol import (
    Action,
    ProviderError,
    contains_error,
    set_path,
    transport_error,
)

logger = structlog.get_logger(__name__)

Executor = Callable[..., ExecutionResult]


class ListError(Error):
    """A listing that stopped part way; ``partial`` holds what was read."""

    __slots__ = ("partial",)

    def __init__(self, detail: str, partial: list[Resource] | None = None) -> None:
        super().__init__(detail)
        self.partial = partial or []


class ScriptResource(Resource):
    """A resource managed by a ``ScriptProvider``."""

    def update(self, should: AttrMap) -> Result[ChangeList]:
        provider = self.provider
        if provider is None:
            return Result(Error(f"the provider for '{self.name}' is no longer loaded"))
        return provider.update_resource(self, should)


def _json_scalar_to_string(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return str(value)
    return None


class ScriptProvider(Provider):
    """Provider backed by an executable that speaks the JSON protocol.

    Args:
        path: The provider script
        metadata: Parsed metadata the script reported for ``describe``
        timeout: Seconds to wait for each script run; None waits forever
        executor: Function used to run the script, ``execute`` by default
    """

    def __init__(
        self,
        path: Path | str,
        metadata: dict[str, Any],
        *,
        timeout: float | None = None,
        executor: Executor = execute,
    ) -> None:
        super().__init__()
        self._path = Path(path)
        self._metadata = metadata
        self._timeout = timeout
        self._executor = executor

    @property
    def path(self) -> Path:
        return self._path

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata

    @property
    def source(self) -> str:
        return str(self._path)

    @property
    def name(self) -> str:
        return self._path.stem

    def describe(self) -> Result[ProviderSpec]:
        return ProviderSpec.read(self._path, self._metadata)

    def suitable(self) -> Result[bool]:
        meta = self._metadata.get("provider") if isinstance(self._metadata, dict) else None
        if not isinstance(meta, dict):
            return Result(Error("expected 'provider' key in metadata to contain a map"))

        flag = meta.get("suitable")
        if isinstance(flag, bool):
            return Result(flag)
        if flag in ("true", "false"):
            return Result(flag == "true")
        return Result(Error(
            f"provider {self._path} (json): metadata 'suitable' must be either "
            f"'true' or 'false' but was '{'' if flag is None else flag}'"
        ))

    def flush(self) -> None:
        # Every update is applied by its own script run
        pass

    def create(self, name: str) -> ScriptResource:
        return ScriptResource(self, name)

    def run_action(self, action: Action, request: dict[str, Any]) -> Result[dict[str, Any]]:
        """Run the script for ``action`` and parse its response.

        Args:
            action: The action to run
            request: Request document sent on stdin

        Returns:
            Result with the response document
        """
        res = self._executor(
            self._path,
            [action.as_arg()],
            json.dumps(request),
            merge_environment=True,
            trim_output=True,
            timeout=self._timeout,
        )
        error = transport_error(action, res)
        if error is not None:
            return Result(error)

        try:
            document = json.loads(res.output)
        except ValueError as e:
            return Result(Error(f"action '{action.value}' produced invalid JSON: {e}"))
        if not isinstance(document, dict):
            return Result(Error(
                f"action '{action.value}' produced invalid JSON: expected an object"
            ))
        return Result(document)

    def update_resource(self, resource: Resource, should: AttrMap) -> Result[ChangeList]:
        """Ask the script to bring ``resource`` into the state ``should``.

        On success every present attribute of ``should`` except the name is
        copied into ``resource``; the script is not asked again to confirm.
        """
        request: dict[str, Any] = {}
        set_path(request, ("ral", "noop"), False)
        set_path(request, ("resource", NAME_ATTR), resource.name)
        for key, value in should.items():
            if key == NAME_ATTR:
                continue
            set_path(request, ("resource", key), Value.of(value).to_string())

        out = self.run_action(Action.UPDATE, request)
        if not out:
            logger.error("action_failed", provider=str(self._path), action="update",
                         detail=out.err().detail)
            return Result(out.err())
        document = out.unwrap()

        failure = contains_error(document)
        if failure is not None:
            return Result(ProviderError(f"update failed: {failure.detail}", failure.kind_name))

        changes = ChangeList()
        if "changes" not in document:
            return Result(changes)

        json_changes = document["changes"]
        if not isinstance(json_changes, dict):
            return Result(Error("malformed changes: 'changes' must be an object"))
        for attr, entry in json_changes.items():
            for field in ("is", "was"):
                if not isinstance(entry, dict) or field not in entry:
                    return Result(Error(
                        f"malformed change: entry for {attr} does not contain '{field}'"
                    ))
            is_text = _json_scalar_to_string(entry["is"])
            was_text = _json_scalar_to_string(entry["was"])
            if is_text is None or was_text is None:
                return Result(Error(
                    f"malformed change: entry for {attr} must have string 'is' and 'was'"
                ))
            changes.add(attr, Value(is_text), Value(was_text))

        for key, value in should.items():
            value = Value.of(value)
            if key != NAME_ATTR and value.is_present():
                resource[key] = value
        return Result(changes)

    def resource_from_json(self, document: Any) -> Result[ScriptResource]:
        """Build a resource from a ``resource`` object in a response.

        Attribute values are kept as strings; they are not converted using
        the attribute spec.
        """
        if not isinstance(document, dict):
            return Result(Error("resource must be an object"))
        if NAME_ATTR not in document:
            return Result(Error("resource does not have a name"))
        name = _json_scalar_to_string(document[NAME_ATTR])
        if name is None:
            return Result(Error("resource name must be a string"))

        rsrc = self.create(name)
        for key, raw in document.items():
            if key == NAME_ATTR:
                continue
            if raw is None:
                continue
            text = _json_scalar_to_string(raw)
            if text is None:
                return Result(Error(
                    f"resource '{name}': attribute '{key}' must be a string"
                ))
            rsrc[key] = Value(text)
        return Result(rsrc)

    def lookup(self, name: str) -> Result[ScriptResource | None]:
        """Find a resource by name, telling "not found" apart from failure.

        Returns:
            Result with the resource, with None if the script reported it
            as unknown, or with the error that stopped the lookup
        """
        request: dict[str, Any] = {}
        set_path(request, ("resource", NAME_ATTR), name)

        out = self.run_action(Action.FIND, request)
        if not out:
            return Result(out.err())
        document = out.unwrap()

        failure = contains_error(document)
        if failure is not None:
            if failure.is_not_found:
                return Result.success(None)
            return Result(ProviderError(
                f"find for name '{name}' failed with error {failure.detail}",
                failure.kind_name,
            ))

        if "resource" not in document:
            return Result(Error(f"find of '{name}' did not produce a 'resource' entry"))
        rsrc = self.resource_from_json(document["resource"])
        if not rsrc:
            return Result(Error(f"find of '{name}': {rsrc.err().detail}"))
        found = rsrc.unwrap()
        if found.name != name:
            return Result(Error(
                f"find of name '{name}' returned resource named '{found.name}'"
            ))
        return Result(found)

    def find(self, name: str) -> ScriptResource | None:
        """Find a resource by name; None if it is missing or the lookup failed.

        Failures are logged. Use ``lookup`` to tell the two apart.
        """
        res = self.lookup(name)
        if res:
            if res.ok() is None:
                logger.debug("resource_not_found", provider=str(self._path), name=name)
            return res.ok()

        error = res.err()
        if isinstance(error, ProviderError):
            logger.warning("find_failed", provider=str(self._path), name=name,
                           detail=error.detail)
        else:
            logger.error("find_failed", provider=str(self._path), name=name,
                         detail=error.detail)
        return None

    def list_instances(self) -> Result[list[ScriptResource]]:
        """List all resources, reporting why a listing failed.

        Returns:
            Result with the resources. If converting one entry fails the
            listing stops there and the error is a ``ListError`` whose
            ``partial`` holds the resources read before it.
        """
        out = self.run_action(Action.LIST, {})
        if not out:
            return Result(out.err())
        document = out.unwrap()

        failure = contains_error(document)
        if failure is not None:
            return Result(ProviderError(
                f"list failed with error {failure.detail}", failure.kind_name
            ))

        json_rsrcs = document.get("resources")
        if not isinstance(json_rsrcs, list):
            return Result(Error("list did not produce a 'resources' entry"))

        result: list[ScriptResource] = []
        for json_rsrc in json_rsrcs:
            rsrc = self.resource_from_json(json_rsrc)
            if not rsrc:
                return Result(ListError(f"list failed: {rsrc.err().detail}", result))
            result.append(rsrc.unwrap())
        return Result(result)

    def instances(self) -> list[ScriptResource]:
        """List all resources; failures are logged.

        A failed listing gives the resources read before the failure, which
        is an empty list unless converting an entry went wrong.
        """
        res = self.list_instances()
        if res:
            return res.unwrap()

        error = res.err()
        logger.error("list_failed", provider=str(self._path), detail=error.detail)
        if isinstance(error, ListError):
            return error.partial
        return []
