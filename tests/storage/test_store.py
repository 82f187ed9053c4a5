"""Tests for scoped storage."""

import dataclasses as _dataclasses
import typing as _typing

import pytest as _pytest

import questline.errors as errors
import questline.storage as storage


@_dataclasses.dataclass
class User:
    name: str
    age: int


class TestZeroValue:
    """Tests for zero_value."""

    @_pytest.mark.parametrize(
        ("type_", "expected"),
        [(int, 0), (str, ""), (bool, False), (float, 0.0), (list, []), (dict, {})],
    )
    def test_builtin_types(self, type_: type, expected: _typing.Any) -> None:
        """Builtins yield their empty instance."""
        assert storage.zero_value(type_) == expected

    def test_parametrized_generic(self) -> None:
        """list[int] yields an empty list."""
        assert storage.zero_value(list[int]) == []

    def test_other_types_yield_none(self) -> None:
        """Arbitrary classes yield None."""
        assert storage.zero_value(User) is None
        assert storage.zero_value(None) is None


class TestSubStores:
    """Tests for namespace handling."""

    def test_sub_is_get_or_create(self, store: storage.Storage) -> None:
        """An unknown namespace is created empty."""
        sub = store.sub("fresh")
        assert len(sub) == 0
        assert "fresh" in store.namespaces()

    def test_sub_returns_same_object(self, store: storage.Storage) -> None:
        """Repeated lookups return the same sub-store."""
        assert store.sub(storage.StorageKeys.ARGUMENTS) is store.sub(storage.StorageKeys.ARGUMENTS)

    def test_default_namespace(self) -> None:
        """sub() without a namespace returns the configured default."""
        store = storage.Storage(default_namespace="main")
        store.sub("main").put("k", 1)
        assert store.sub().get("k", int) == 1
        assert store.default_namespace == "main"

    def test_namespaces_are_isolated(self, store: storage.Storage) -> None:
        """Writes to one namespace are invisible in another."""
        store.sub("a").put("k", 1)
        assert store.sub("b").get("k", int) == 0


class TestGetPut:
    """Tests for typed reads."""

    def test_roundtrip_same_type(self, store: storage.Storage) -> None:
        """A value of the requested type is returned as is."""
        user = User("ann", 30)
        store.put("user", user)
        assert store.get("user", User) is user

    def test_put_overwrites(self, store: storage.Storage) -> None:
        """put replaces previous values unconditionally."""
        store.put("k", 1)
        store.put("k", 2)
        assert store.get("k", int) == 2

    def test_absent_key_yields_zero_value(self, store: storage.Storage) -> None:
        """Reading a missing key is not an error."""
        assert store.get("missing", int) == 0
        assert store.get("missing", str) == ""
        assert store.get("missing", User) is None

    def test_stored_none_yields_zero_value(self, store: storage.Storage) -> None:
        """None at rest reads like an absent value."""
        store.put("k", None)
        assert store.get("k", list) == []

    def test_untyped_get_returns_raw(self, store: storage.Storage) -> None:
        """Without a type the raw value comes back."""
        store.put("k", {"a": 1})
        assert store.get("k") == {"a": 1}

    def test_coercion(self, store: storage.Storage) -> None:
        """Compatible values are coerced through pydantic."""
        store.put("n", "42")
        store.put("user", {"name": "bob", "age": "7"})
        assert store.get("n", int) == 42
        assert store.get("user", User) == User("bob", 7)

    def test_incompatible_type_raises(self, store: storage.Storage) -> None:
        """A value that cannot be read as the type raises StorageTypeError."""
        store.put("k", "not a number")
        with _pytest.raises(errors.StorageTypeError) as exc_info:
            store.get("k", int)
        assert isinstance(exc_info.value, TypeError)

    def test_index_reads_sequence_element(self, store: storage.Storage) -> None:
        """index selects an element of a stored sequence."""
        store.put("users", [User("a", 1), User("b", 2)])
        assert store.get("users", User, 1) == User("b", 2)

    def test_index_on_non_sequence_raises(self, store: storage.Storage) -> None:
        """index on a scalar raises StorageTypeError."""
        store.put("k", 5)
        with _pytest.raises(errors.StorageTypeError, match="not a sequence"):
            store.get("k", int, 0)

    def test_index_out_of_range(self, store: storage.Storage) -> None:
        """index past the end raises IndexError."""
        store.put("k", [1])
        with _pytest.raises(IndexError):
            store.get("k", int, 3)

    def test_inspection(self, store: storage.Storage) -> None:
        """keys, __contains__ and __len__ reflect stored entries."""
        store.put("a", 1)
        store.put(storage.StorageKeys.HOOKS, {})
        assert store.keys() == ["a", storage.StorageKeys.HOOKS]
        assert "a" in store
        assert len(store) == 2
        store.clear()
        assert len(store) == 0


class TestExtractors:
    """Tests for DataExtractor reads."""

    def test_extractor_applied_to_raw_value(self, store: storage.Storage) -> None:
        """The extractor receives the raw value stored under its key."""
        store.put("response", {"status": 201, "body": {"id": 9}})
        status = storage.DataExtractor("response", lambda raw: raw["status"])
        assert store.get(status, int) == 201

    def test_field_extractor(self, store: storage.Storage) -> None:
        """field() reads mapping items and attributes."""
        store.put("user", User("zed", 40))
        store.put("payload", {"name": "amy"})
        assert store.get(storage.field("user", "age"), int) == 40
        assert store.get(storage.field("payload", "name"), str) == "amy"

    def test_index_applied_before_extraction(self, store: storage.Storage) -> None:
        """index picks the element, then the extractor runs on it."""
        store.put("responses", [{"status": 200}, {"status": 404}])
        status = storage.field("responses", "status")
        assert store.get(status, int, 1) == 404

    def test_static_test_data(self, store: storage.Storage) -> None:
        """static_test_data reads one entry of the STATIC_DATA map."""
        store.put(storage.StorageKeys.STATIC_DATA, {"password": "s3cret"})
        assert store.get(storage.static_test_data("password"), str) == "s3cret"
        assert store.get(storage.static_test_data("missing"), str) == ""

    def test_extractor_on_absent_key(self, store: storage.Storage) -> None:
        """A missing raw value reads as the zero value without calling the extractor."""
        def _boom(raw: _typing.Any) -> _typing.Any:
            raise AssertionError("should not be called")

        assert store.get(storage.DataExtractor("nothing", _boom), int) == 0


class TestHookData:
    """Tests for reading hook outputs."""

    def test_hook_data(self, store: storage.Storage) -> None:
        """hook_data reads from the map stored under HOOKS."""
        store.put(storage.StorageKeys.HOOKS, {"token": "abc", "count": "3"})
        assert store.hook_data("token", str) == "abc"
        assert store.hook_data("count", int) == 3

    def test_hook_data_missing(self, store: storage.Storage) -> None:
        """Missing outputs read as zero values."""
        assert store.hook_data("token", str) == ""
        store.put(storage.StorageKeys.HOOKS, {})
        assert store.hook_data("token", list) == []
