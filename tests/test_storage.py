"""Tests for the key-value backends and the typed repositories."""

import json
import os
from decimal import Decimal

import pytest
from pydantic import ValidationError

from expense_tracker.models import StoredCredentials, TransactionKind, User
from expense_tracker.services.storage import (
    CorruptDataError,
    CredentialRepository,
    CurrentUserRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    LedgerRepository,
    QuotaExceededError,
    StorageError,
    StorageKeys,
)


class TestInMemoryStore:

    def test_get_set_remove(self, store):
        assert store.get("k") is None
        store.set("k", {"a": [1, 2]})
        assert store.get("k") == {"a": [1, 2]}
        assert store.keys() == ["k"]
        assert store.remove("k") is True
        assert store.remove("k") is False
        assert store.get("k") is None

    def test_values_are_copies(self, store):
        """Mutating a returned value does not change what is stored."""
        value = {"items": [1]}
        store.set("k", value)
        value["items"].append(2)
        store.get("k")["items"].append(3)

        assert store.get("k") == {"items": [1]}

    def test_non_serializable_value(self, store):
        with pytest.raises(StorageError):
            store.set("k", object())

    def test_quota(self):
        store = InMemoryKeyValueStore(quota_bytes=20)
        store.set("k", "small")

        with pytest.raises(QuotaExceededError):
            store.set("k", "x" * 50)

        assert store.get("k") == "small"
        assert store.used_bytes() == len("k") + len('"small"')


class TestJsonFileStore:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "data.json"
        JsonFileKeyValueStore(path).set("k", [1, 2, 3])

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get("k") == [1, 2, 3]

    def test_file_maps_keys_to_encoded_strings(self, tmp_path):
        path = tmp_path / "data.json"
        JsonFileKeyValueStore(path).set("k", {"a": 1})

        assert json.loads(path.read_text(encoding="utf-8")) == {"k": '{"a": 1}'}

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "nested" / "data.json")
        assert store.keys() == []
        store.set("k", 1)
        assert store.path.exists()

    def test_remove_persists(self, tmp_path):
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("k", 1)
        assert store.remove("k") is True
        assert store.remove("k") is False
        assert JsonFileKeyValueStore(path).get("k") is None

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"k": 1}'])
    def test_corrupt_file(self, tmp_path, content):
        path = tmp_path / "data.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(CorruptDataError):
            JsonFileKeyValueStore(path)

    def test_failed_write_rolls_back(self, tmp_path, monkeypatch):
        """When the file cannot be replaced, memory reverts too."""
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("k", "before")

        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(os, "replace", broken_replace)

        with pytest.raises(StorageError):
            store.set("k", "after")

        assert store.get("k") == "before"

    def test_errors_keep_their_cause(self, tmp_path, monkeypatch):
        """Wrapped storage errors chain the original exception."""
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptDataError) as exc_info:
            JsonFileKeyValueStore(path)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

        path.unlink()
        store = JsonFileKeyValueStore(path)

        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(StorageError) as exc_info:
            store.set("k", 1)
        assert isinstance(exc_info.value.__cause__, OSError)

        with pytest.raises(StorageError) as exc_info:
            InMemoryKeyValueStore().set("k", object())
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_write_retries_transient_errors(self, tmp_path, monkeypatch):
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        real_replace = os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append(src)
            if len(calls) == 1:
                raise OSError("busy")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", flaky_replace)
        store.set("k", "v")

        assert len(calls) == 2
        assert JsonFileKeyValueStore(path).get("k") == "v"


class TestRepositories:

    def test_storage_keys(self):
        keys = StorageKeys("app")
        assert keys.user == "app-user"
        assert keys.users == "app-users"
        assert keys.expenses("bob") == "app-expenses:bob"

    def test_ledger_missing_is_empty(self, store):
        assert LedgerRepository(store).load("nobody") == []

    def test_ledger_loads_stored_type_field(self, store):
        """Records stored with 'type' and numeric amounts still load."""
        store.set("expense-tracker-expenses:bob", [{
            "id": "1",
            "description": "Taxi",
            "amount": 12.5,
            "date": "2024-01-01",
            "type": "expense",
            "category": "Transportation",
        }])

        [txn] = LedgerRepository(store).load("bob")
        assert txn.kind == TransactionKind.EXPENSE
        assert txn.amount == Decimal("12.5")

    def test_ledger_invalid_records(self, store):
        store.set("expense-tracker-expenses:bob", [{"id": "1", "amount": -3}])
        with pytest.raises(CorruptDataError) as exc_info:
            LedgerRepository(store).load("bob")
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_ledger_clear(self, store):
        repo = LedgerRepository(store)
        repo.save("bob", [])
        assert repo.clear("bob") is True
        assert repo.clear("bob") is False

    def test_current_user(self, store):
        repo = CurrentUserRepository(store)
        assert repo.load() is None

        repo.save(User(username="alice", name="Alice"))
        assert repo.load() == User(username="alice", name="Alice")

        repo.clear()
        assert repo.load() is None

    def test_current_user_corrupt(self, store):
        store.set("expense-tracker-user", {"username": ""})
        with pytest.raises(CorruptDataError):
            CurrentUserRepository(store).load()

    def test_credentials(self, store):
        repo = CredentialRepository(store, "custom")
        assert repo.load_all() == {}

        repo.save_all({"alice": StoredCredentials(password="pw", name="Alice")})

        assert store.get("custom-users") == {"alice": {"password": "pw", "name": "Alice"}}
        assert repo.load_all()["alice"].name == "Alice"
