"""Authentication package."""

from expense_tracker.auth.directory import (
    AuthenticationError,
    AuthError,
    DuplicateUserError,
    UserDirectory,
)

__all__ = [
    "AuthenticationError",
    "AuthError",
    "DuplicateUserError",
    "UserDirectory",
]
