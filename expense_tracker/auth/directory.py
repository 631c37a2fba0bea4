"""
User Directory

Plaintext username/password lookup over the stored "users" map.

NOTE: This is a local convenience login, not a security mechanism.
Passwords are stored and compared as given.
"""

from typing import Optional

from expense_tracker.errors import ExpenseTrackerError
from expense_tracker.models.user import StoredCredentials, User
from expense_tracker.services.storage import CredentialRepository


class AuthError(ExpenseTrackerError):
    """Base exception for sign-in and registration."""
    pass


class AuthenticationError(AuthError):
    """Missing fields or a username/password mismatch."""
    pass


class DuplicateUserError(AuthError):
    """The username is already registered."""
    pass


class UserDirectory:
    """
    The credential directory collaborator.

    Given a username/password pair, returns the matching User or None.
    Given a new username/password/name, registers it if absent.
    """

    def __init__(self, credentials: CredentialRepository):
        self._credentials = credentials

    def authenticate(self, username: str, password: str) -> Optional[User]:
        entry = self._credentials.load_all().get(username)
        if entry is None:
            return None
        if entry.password != password:
            return None
        return User(username=username, name=entry.name)

    def register(self, username: str, password: str, name: str) -> User:
        """
        Add a user.

        Raises:
            DuplicateUserError: The username is taken
            StorageError: The directory could not be written
        """
        users = self._credentials.load_all()
        if username in users:
            raise DuplicateUserError("Username already exists")

        users[username] = StoredCredentials(password=password, name=name)
        self._credentials.save_all(users)
        return User(username=username, name=name)
