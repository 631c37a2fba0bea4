"""
Session Orchestration for Expense Tracker

This module ties together all the components and defines the
session flows:
1. Restore (resume whoever was signed in last time)
2. Sign in / Register (credentials -> user -> load ledger)
3. Sign out (forget user -> unload ledger)

DESIGN DECISION: The session is an explicit object, not ambient state.
Whoever renders the UI holds one session and calls into it; the ledger
engine is only reachable through the session while someone is signed in.
"""

from typing import Optional

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.auth import AuthenticationError, UserDirectory
from expense_tracker.config import Settings, get_settings
from expense_tracker.config.settings import StorageSettings
from expense_tracker.ledger import LedgerEngine
from expense_tracker.models.user import User
from expense_tracker.services.storage import (
    CredentialRepository,
    CurrentUserRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerRepository,
)
from expense_tracker.validation import TransactionValidator


class ExpenseTrackerSession:
    """
    One logical user session.

    States:
    - signed out: current_user is None, the ledger is unloaded
    - signed in as U: current_user is U, the ledger holds U's transactions
    """

    def __init__(
        self,
        directory: UserDirectory,
        ledger: LedgerEngine,
        current_user_repository: CurrentUserRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._directory = directory
        self._ledger = ledger
        self._current_user_repository = current_user_repository
        self._audit_logger = audit_logger
        self._user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def ledger(self) -> LedgerEngine:
        return self._ledger

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    def _start(self, user: User, fresh: bool = False) -> None:
        """Load the user's ledger, then remember them for next time."""
        self._ledger.load(user.username, fresh=fresh)
        self._current_user_repository.save(user)
        self._user = user

    def restore(self) -> Optional[User]:
        """
        Resume the last signed-in user, if any.

        Returns the restored user, or None if nobody was signed in.
        """
        user = self._current_user_repository.load()
        if user is None:
            return None

        self._ledger.load(user.username)
        self._user = user
        return user

    def sign_in(self, username: str, password: str) -> User:
        """
        Sign in with existing credentials.

        Raises:
            AuthenticationError: Missing fields or wrong username/password
        """
        username = (username or "").strip()
        password = (password or "").strip()

        if not username or not password:
            raise AuthenticationError("Please fill in all required fields")

        user = self._directory.authenticate(username, password)
        if user is None:
            if self._audit_logger:
                self._audit_logger.log_sign_in_failed(username)
            raise AuthenticationError("Invalid username or password")

        self._start(user)

        if self._audit_logger:
            self._audit_logger.log_user_signed_in(user.username)

        return user

    def register(self, username: str, password: str, name: str) -> User:
        """
        Create an account and sign straight in with an empty ledger.

        Raises:
            AuthenticationError: A required field is missing
            DuplicateUserError: The username is taken
        """
        username = (username or "").strip()
        password = (password or "").strip()
        name = (name or "").strip()

        if not username or not password:
            raise AuthenticationError("Please fill in all required fields")
        if not name:
            raise AuthenticationError("Please enter your full name")

        user = self._directory.register(username, password, name)
        self._start(user, fresh=True)

        if self._audit_logger:
            self._audit_logger.log_user_registered(user.username)

        return user

    def sign_out(self) -> None:
        """Forget the signed-in user. Their ledger stays persisted."""
        user = self._user
        if user is None:
            return

        self._current_user_repository.clear()
        self._ledger.unload()
        self._user = None

        if self._audit_logger:
            self._audit_logger.log_user_signed_out(user.username)


def create_store(storage_settings: StorageSettings) -> KeyValueStoreInterface:
    """Build the configured key-value backend."""
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore(quota_bytes=storage_settings.quota_bytes)
    return JsonFileKeyValueStore(
        storage_settings.path,
        quota_bytes=storage_settings.quota_bytes,
    )


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStoreInterface] = None,
) -> ExpenseTrackerSession:
    """
    Create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Key-value store to use instead of the configured backend

    Returns:
        A signed-out ExpenseTrackerSession wired to the store
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level, app_settings.log_json)

    store = store if store is not None else create_store(storage_settings)
    prefix = storage_settings.key_prefix

    audit_logger = AuditLogger()
    ledger = LedgerEngine(
        repository=LedgerRepository(store, prefix),
        validator=TransactionValidator(),
        audit_logger=audit_logger,
    )

    return ExpenseTrackerSession(
        directory=UserDirectory(CredentialRepository(store, prefix)),
        ledger=ledger,
        current_user_repository=CurrentUserRepository(store, prefix),
        audit_logger=audit_logger,
    )
