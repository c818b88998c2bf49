"""Test configuration and fixtures."""

import copy
import json
import textwrap
from pathlib import Path

import pytest
import structlog

from ral.core.registry import ProviderRegistry
from ral.execution import ExecutionResult
from ral.providers.script import ScriptProvider

USER_METADATA = {
    "provider": {
        "type": "user",
        "invoke": "json",
        "actions": ["list", "find", "update"],
        "suitable": True,
        "attributes": {
            "name": {"desc": "the user name"},
            "shell": {"type": "string", "desc": "login shell"},
            "ensure": {"type": "enum[present, absent]"},
            "admin": {"type": "boolean"},
            "groups": {"type": "array[string]"},
        },
    }
}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: tests that run real provider scripts")


@pytest.fixture(autouse=True)
def clean_registry():
    """Empty the provider registry around each test."""
    ProviderRegistry.clear()
    yield
    ProviderRegistry.clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by a test (e.g. through the CLI)."""
    yield
    structlog.reset_defaults()


class FakeExecutor:
    """Stands in for ral.execution.execute and records each call."""

    def __init__(self, *results: ExecutionResult):
        self.results = list(results)
        self.calls: list[dict] = []

    def __call__(self, path, args=(), stdin=None, **options):
        self.calls.append({"path": path, "args": list(args), "stdin": stdin, **options})
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]

    @property
    def requests(self) -> list:
        """Decoded JSON requests sent on stdin."""
        return [json.loads(call["stdin"]) if call["stdin"] else None for call in self.calls]


def _reply(document=None, *, exit_code=0, output=None, error=""):
    if output is None:
        output = json.dumps(document) if document is not None else ""
    return ExecutionResult(exit_code == 0, exit_code, output, error)


@pytest.fixture
def user_metadata():
    """Metadata of a provider for the user type."""
    return copy.deepcopy(USER_METADATA)


@pytest.fixture
def reply():
    """Build the ExecutionResult of a script run from a response document."""
    return _reply


@pytest.fixture
def fake_executor():
    """The FakeExecutor class."""
    return FakeExecutor


@pytest.fixture
def make_provider():
    """Build a prepared ScriptProvider driven by a FakeExecutor."""
    def _make(*results, metadata=None, path="/usr/share/ral/data/providers/useradd.sh"):
        executor = FakeExecutor(*results) if results else FakeExecutor(_reply({}))
        provider = ScriptProvider(Path(path), metadata or USER_METADATA, executor=executor)
        assert provider.prepare()
        return provider, executor
    return _make


@pytest.fixture
def write_script(tmp_path: Path):
    """Write an executable /bin/sh script into <tmp>/data/providers."""
    providers_dir = tmp_path / "data" / "providers"
    providers_dir.mkdir(parents=True)

    def _write(name: str, body: str) -> Path:
        script = providers_dir / name
        script.write_text("#!/bin/sh\n" + textwrap.dedent(body).lstrip())
        script.chmod(0o755)
        return script
    return _write


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data dir the write_script fixture writes into."""
    return tmp_path / "data"
