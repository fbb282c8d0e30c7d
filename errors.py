"""
Error types raised by the user store.

Each error also derives from the closest builtin exception so callers can
catch either the specific type or the builtin one.
"""


class UserStoreError(Exception):
    """Base class for all user store errors."""


class ValidationError(UserStoreError, ValueError):
    """A name or balance value failed validation."""


class ConflictError(UserStoreError, FileExistsError):
    """The generated id already has a storage file."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with id={user_id} already exists.")
        self.user_id = user_id


class NotFoundError(UserStoreError, LookupError):
    """No storage file exists for the requested id."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with id={user_id} does not exist.")
        self.user_id = user_id


class UninitializedStateError(UserStoreError, RuntimeError):
    """The record has no id yet (neither created nor loaded)."""


class CorruptRecordError(UserStoreError, ValueError):
    """A storage file could not be parsed into a name and a balance."""
