"""
Typed repositories over the key-value store.

Each repository owns one slice of the persisted layout:
- <prefix>-user                  -> the signed-in User
- <prefix>-users                 -> username -> StoredCredentials
- <prefix>-expenses:<username>   -> that user's list of Transaction

Records are validated on the way in, so a tampered or truncated file
surfaces as CorruptDataError instead of a half-valid ledger.
"""

from typing import Optional

from pydantic import TypeAdapter, ValidationError

from expense_tracker.models.transaction import Transaction
from expense_tracker.models.user import StoredCredentials, User
from expense_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
)


DEFAULT_KEY_PREFIX = "expense-tracker"

_TRANSACTIONS = TypeAdapter(list[Transaction])
_CREDENTIALS = TypeAdapter(dict[str, StoredCredentials])


class StorageKeys:
    """Key naming for one key prefix."""

    def __init__(self, prefix: str = DEFAULT_KEY_PREFIX):
        self.prefix = prefix

    @property
    def user(self) -> str:
        return f"{self.prefix}-user"

    @property
    def users(self) -> str:
        return f"{self.prefix}-users"

    def expenses(self, username: str) -> str:
        return f"{self.prefix}-expenses:{username}"


class LedgerRepository:
    """
    Loads and saves one user's full record set.

    The whole list is the unit of persistence: save always rewrites it.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self._store = store
        self._keys = StorageKeys(key_prefix)

    def load(self, username: str) -> list[Transaction]:
        """Return the user's records in stored order; [] for a new user."""
        key = self._keys.expenses(username)
        raw = self._store.get(key)
        if raw is None:
            return []

        try:
            return _TRANSACTIONS.validate_python(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Stored ledger for {username!r} is invalid: {e.error_count()} errors"
            ) from e

    def save(self, username: str, transactions: list[Transaction]) -> None:
        self._store.set(
            self._keys.expenses(username),
            _TRANSACTIONS.dump_python(transactions, mode="json"),
        )

    def clear(self, username: str) -> bool:
        return self._store.remove(self._keys.expenses(username))


class CurrentUserRepository:
    """Remembers who was signed in, so a restart can resume the session."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self._store = store
        self._keys = StorageKeys(key_prefix)

    def load(self) -> Optional[User]:
        raw = self._store.get(self._keys.user)
        if raw is None:
            return None
        try:
            return User.model_validate(raw)
        except ValidationError as e:
            raise CorruptDataError(f"Stored user is invalid: {e.error_count()} errors") from e

    def save(self, user: User) -> None:
        self._store.set(self._keys.user, user.model_dump(mode="json"))

    def clear(self) -> bool:
        return self._store.remove(self._keys.user)


class CredentialRepository:
    """The plaintext username -> {password, name} directory."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self._store = store
        self._keys = StorageKeys(key_prefix)

    def load_all(self) -> dict[str, StoredCredentials]:
        raw = self._store.get(self._keys.users)
        if raw is None:
            return {}
        try:
            return _CREDENTIALS.validate_python(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Stored user directory is invalid: {e.error_count()} errors"
            ) from e

    def save_all(self, users: dict[str, StoredCredentials]) -> None:
        self._store.set(self._keys.users, _CREDENTIALS.dump_python(users, mode="json"))
