"""Tests for ral.core.result module."""

import copy

import pytest

from ral.core.result import Error, Result, Unimplemented
from ral.exceptions import RalError, ResultContractError


class TestError:
    """Tests for Error class."""

    def test_detail(self):
        """detail and str() give the message."""
        error = Error("boom")
        assert error.detail == "boom"
        assert str(error) == "boom"

    def test_equality(self):
        """Errors with the same type and detail are equal."""
        assert Error("boom") == Error("boom")
        assert Error("boom") != Error("bang")

    def test_unimplemented(self):
        """Unimplemented is an Error with a fixed message."""
        error = Unimplemented()
        assert isinstance(error, Error)
        assert error.detail == "not implemented"
        assert error != Error("not implemented")


class TestResultConstruction:
    """Tests for building results."""

    def test_from_value(self):
        """A result built from a value is ok."""
        res = Result(42)
        assert res.is_ok()
        assert not res.is_err()
        assert res.ok() == 42
        assert res.err() is None
        assert bool(res)

    def test_from_error(self):
        """A result built from an Error is an error."""
        error = Error("boom")
        res = Result(error)
        assert res.is_err()
        assert not res.is_ok()
        assert res.err() == error
        assert res.ok() is None
        assert not res

    def test_falsy_value_is_still_ok(self):
        """Truthiness follows is_ok(), not the payload."""
        assert Result(False)
        assert Result(0)
        assert Result([])
        assert Result(None)

    def test_failure_from_message(self):
        """failure() accepts a plain message."""
        res = Result.failure("boom")
        assert res.err() == Error("boom")

    def test_success_can_hold_an_error(self):
        """success() stores even an Error as the success payload."""
        res = Result.success(Error("payload"))
        assert res.is_ok()
        assert res.ok() == Error("payload")


class TestResultAccess:
    """Tests for reading payloads."""

    def test_unwrap_ok(self):
        assert Result("payload").unwrap() == "payload"
        assert Result("payload").value == "payload"

    def test_unwrap_error_is_contract_violation(self):
        """Unwrapping an error result raises a non-RalError exception."""
        res = Result(Error("boom"))
        with pytest.raises(ResultContractError, match="boom"):
            res.unwrap()
        assert not issubclass(ResultContractError, RalError)

    def test_unwrap_err(self):
        assert Result(Error("boom")).unwrap_err() == Error("boom")
        with pytest.raises(ResultContractError):
            Result(1).unwrap_err()

    def test_unwrap_or(self):
        assert Result(1).unwrap_or(2) == 1
        assert Result(Error("boom")).unwrap_or(2) == 2


class TestResultAssignment:
    """Tests for replacing the payload of a result."""

    def test_assign_error_to_ok(self):
        """Assigning an error flips an ok result."""
        res = Result("value")
        res.assign(Error("boom"))
        assert res.is_err()
        assert res.ok() is None
        assert res.err() == Error("boom")

    def test_assign_value_to_error(self):
        """Assigning a value flips an error result."""
        res = Result(Error("boom"))
        res.assign("value")
        assert res.is_ok()
        assert res.err() is None
        assert res.ok() == "value"

    def test_assign_result(self):
        """Assigning another result copies its tag and payload."""
        res = Result(1)
        res.assign(Result(Error("boom")))
        assert res.err() == Error("boom")
        res.assign(Result(2))
        assert res.ok() == 2

    def test_self_assignment(self):
        """Assigning a result to itself keeps it intact."""
        res = Result("value")
        assert res.assign(res) is res
        assert res.ok() == "value"

    def test_repeated_cycles(self):
        """Exactly one payload is live after every assignment."""
        res = Result(0)
        for i in range(100):
            res.assign(Error(f"e{i}"))
            assert res.is_err() != res.is_ok()
            assert res.ok() is None
            res.assign(i)
            assert res.is_ok() != res.is_err()
            assert res.err() is None
            assert res.ok() == i

    def test_copy_is_independent(self):
        """A copy does not follow later assignments to the copied result."""
        res = Result("value")
        dup = copy.copy(res)
        res.assign(Error("boom"))
        assert dup.ok() == "value"
        assert res.is_err()

    def test_equality(self):
        assert Result(1) == Result(1)
        assert Result(1) != Result(2)
        assert Result(Error("x")) == Result(Error("x"))
        assert Result(Error("x")) != Result("x")
