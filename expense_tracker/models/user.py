"""User and credential models."""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """The signed-in identity. Scopes which ledger is active."""
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(
        ...,
        min_length=1,
        description="Unique, immutable login name"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )


class StoredCredentials(BaseModel):
    """
    A credential directory entry.

    NOTE: the password is stored in plaintext. This is a local
    convenience login, not a security mechanism.
    """

    password: str
    name: str
