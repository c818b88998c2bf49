"""Tests for ral.core.resource module."""

import gc

import pytest

from ral.core.attributes import AttrMap, ChangeList
from ral.core.provider import Provider
from ral.core.resource import Resource, is_name
from ral.core.result import Result, Unimplemented
from ral.core.spec import ProviderSpec
from ral.core.value import ABSENT, Value
from ral.exceptions import InvalidAttributeError


class StubProvider(Provider):
    def describe(self):
        return Result(ProviderSpec(type_name="stub"))

    def suitable(self):
        return Result(True)

    def instances(self):
        return []

    def create(self, name):
        return Resource(self, name)


@pytest.fixture
def provider():
    return StubProvider()


class TestResource:
    """Tests for Resource class."""

    def test_name_and_provider(self, provider):
        rsrc = provider.create("alice")
        assert rsrc.name == "alice"
        assert rsrc.provider is provider

    def test_is_name(self):
        assert is_name("name")
        assert not is_name("shell")

    def test_name_is_not_an_attribute(self, provider):
        """Reading or writing "name" as an attribute raises."""
        rsrc = provider.create("alice")
        with pytest.raises(InvalidAttributeError):
            rsrc["name"]
        with pytest.raises(InvalidAttributeError):
            rsrc["name"] = "bob"
        assert rsrc.name == "alice"

    def test_attributes(self, provider):
        rsrc = provider.create("alice")
        assert rsrc["shell"] is ABSENT
        rsrc["shell"] = "/bin/sh"
        assert rsrc["shell"] == Value("/bin/sh")
        assert "shell" in rsrc
        assert rsrc.lookup("shell", str) == "/bin/sh"

    def test_attrs_is_a_copy(self, provider):
        rsrc = provider.create("alice")
        rsrc["shell"] = "/bin/sh"
        attrs = rsrc.attrs
        attrs.clear()
        assert rsrc["shell"] == Value("/bin/sh")

    def test_update_is_unimplemented(self, provider):
        res = provider.create("alice").update(AttrMap())
        assert res.err() == Unimplemented()

    def test_to_dict(self, provider):
        rsrc = provider.create("alice")
        rsrc["admin"] = True
        rsrc["groups"] = ["wheel", "adm"]
        assert rsrc.to_dict() == {"name": "alice", "admin": "true", "groups": "wheel,adm"}

    def test_provider_reference_is_weak(self):
        """A resource does not keep its provider alive."""
        rsrc = StubProvider().create("alice")
        gc.collect()
        assert rsrc.provider is None


class TestCheck:
    """Tests for Resource.check."""

    def test_records_differences(self, provider):
        rsrc = provider.create("alice")
        rsrc["shell"] = "/bin/sh"
        should = AttrMap({"shell": "/bin/zsh"})
        changes = ChangeList()
        rsrc.check(changes, should, ["shell"])
        assert len(changes) == 1
        assert changes[0].attr == "shell"
        assert changes[0].is_value == Value("/bin/zsh")
        assert changes[0].was_value == Value("/bin/sh")

    def test_equal_values_produce_no_change(self, provider):
        rsrc = provider.create("alice")
        rsrc["shell"] = "/bin/sh"
        changes = ChangeList()
        rsrc.check(changes, AttrMap({"shell": "/bin/sh"}), ["shell"])
        assert changes == []

    def test_absent_desired_values_are_ignored(self, provider):
        rsrc = provider.create("alice")
        rsrc["shell"] = "/bin/sh"
        changes = ChangeList()
        rsrc.check(changes, AttrMap(), ["shell", "home"])
        assert changes == []

    def test_only_listed_props_are_compared(self, provider):
        rsrc = provider.create("alice")
        should = AttrMap({"shell": "/bin/zsh", "home": "/home/alice"})
        changes = ChangeList()
        rsrc.check(changes, should, ["home"])
        assert [c.attr for c in changes] == ["home"]
        assert changes[0].was_value is ABSENT

    def test_appends_in_prop_order(self, provider):
        rsrc = provider.create("alice")
        changes = ChangeList()
        changes.add("earlier", "x", "y")
        should = AttrMap({"a": "1", "b": "2"})
        rsrc.check(changes, should, ["b", "a"])
        assert [c.attr for c in changes] == ["earlier", "b", "a"]
