"""Tests for ral.providers.protocol module."""

import pytest

from ral.core.result import Error
from ral.execution import ExecutionResult
from ral.providers.protocol import (
    Action,
    ErrorKind,
    ProviderError,
    contains_error,
    get_path,
    includes,
    set_path,
    transport_error,
)


class TestPaths:
    """Tests for nested key path helpers."""

    def test_set_path_creates_maps(self):
        doc = {}
        set_path(doc, ("resource", "name"), "alice")
        set_path(doc, ("resource", "shell"), "/bin/sh")
        set_path(doc, ("ral", "noop"), False)
        assert doc == {
            "resource": {"name": "alice", "shell": "/bin/sh"},
            "ral": {"noop": False},
        }

    def test_get_path(self):
        doc = {"error": {"message": "boom"}}
        assert get_path(doc, ("error", "message")) == "boom"
        assert get_path(doc, ("error", "kind"), "failed") == "failed"
        assert get_path("not a map", ("x",)) is None

    def test_includes(self):
        doc = {"changes": {"shell": None}}
        assert includes(doc, ("changes", "shell"))
        assert not includes(doc, ("changes", "home"))


class TestAction:
    def test_as_arg(self):
        assert Action.FIND.as_arg() == "ral_action=find"
        assert Action.UPDATE.as_arg() == "ral_action=update"


class TestContainsError:
    """Tests for extracting errors from responses."""

    def test_no_error(self):
        assert contains_error({"resource": {"name": "x"}}) is None

    def test_not_found(self):
        error = contains_error({"error": {"message": "no such user", "kind": "unknown"}})
        assert error.detail == "no such user"
        assert error.kind is ErrorKind.NOT_FOUND
        assert error.is_not_found

    def test_defaults(self):
        """An empty error object still means failure."""
        error = contains_error({"error": {}})
        assert error.detail == ""
        assert error.kind is ErrorKind.FAILED
        assert not error.is_not_found

    def test_other_kind_is_kept(self):
        error = contains_error({"error": {"message": "m", "kind": "timeout"}})
        assert error.kind is ErrorKind.OTHER
        assert error.kind_name == "timeout"

    def test_provider_error_equality(self):
        assert ProviderError("m", "unknown") == ProviderError("m", "unknown")
        assert ProviderError("m", "unknown") != ProviderError("m", "failed")
        assert isinstance(ProviderError("m"), Error)


class TestTransportError:
    """Tests for classifying failed script runs."""

    @pytest.mark.parametrize(
        "output,error,expected",
        [
            ("", "", "action 'find' exited with status 3"),
            ("", "boom", "action 'find' exited with status 3. stderr was 'boom'"),
            ("out", "", "action 'find' exited with status 3. Output was 'out'"),
            (
                "out",
                "boom",
                "action 'find' exited with status 3. Output was 'out'. stderr was 'boom'",
            ),
        ],
    )
    def test_nonzero_exit(self, output, error, expected):
        res = ExecutionResult(False, 3, output, error)
        assert transport_error(Action.FIND, res).detail == expected

    def test_stderr_on_success(self):
        res = ExecutionResult(True, 0, "{}", "warning: deprecated")
        assert transport_error(Action.LIST, res).detail == (
            "action 'list' produced stderr 'warning: deprecated'"
        )

    def test_clean_run(self):
        assert transport_error(Action.LIST, ExecutionResult(True, 0, "{}", "")) is None
