"""
User domain model.

A UserRecord holds one user's id, name and balance and knows how to create,
load and save itself through the storage layer.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

import storage
from errors import UninitializedStateError, ValidationError
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


def validate_name(name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("User name must be a non-empty string.")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"User name cannot be longer than {MAX_NAME_LENGTH} characters.")
    # The storage format is line based.
    if len(name.splitlines()) != 1:
        raise ValidationError("User name cannot contain line breaks.")


def _as_amount(value: float, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{label} must be a number.")
    if not math.isfinite(value):
        raise ValidationError(f"{label} must be a finite number.")
    return float(value)


def _checked_result(new_balance: float) -> float:
    if new_balance < 0:
        raise ValidationError("Balance cannot go below 0.")
    if not math.isfinite(new_balance):
        raise ValidationError("Balance is too large.")
    return new_balance


def validate_id(user_id: int) -> None:
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise ValidationError(f"User id must be an integer, got {user_id!r}.")


def validate_balance(balance: float) -> float:
    """Returns the balance as a float, or raises if it is negative or not a number."""
    value = _as_amount(balance, "Balance")
    if value < 0:
        raise ValidationError("Balance cannot be less than 0.")
    return value


class UserRecord:
    """
    A user entity persisted as `<storage_dir>/<id>.txt`.

    The record starts uninitialized (id is None) and becomes initialized by
    create() or load(). Balance changes and save() require an initialized
    record; nothing is persisted until create() or save() is called.
    """

    def __init__(self, settings: Optional[Settings] = None, rng: Optional[random.Random] = None) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._rng = rng
        self._id: Optional[int] = None
        self._name = ""
        self._balance = 0.0

    def __repr__(self) -> str:
        return f"UserRecord(id={self._id}, name={self._name!r}, balance={self._balance})"

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        # Renaming is allowed before create/load; the caller persists with save().
        validate_name(name)
        self._name = name

    @property
    def balance(self) -> float:
        return self._balance

    @property
    def is_initialized(self) -> bool:
        return self._id is not None

    def create(self, name: str, balance: float) -> None:
        """
        Creates a new user with a random id and persists it.

        Raises ValidationError for a bad name or balance, and ConflictError if
        the drawn id is already taken. A conflict is not retried; call create()
        again to draw another id.
        """
        validate_name(name)
        value = validate_balance(balance)

        user_id = storage.generate_id(self._settings.max_id, self._rng)
        storage.create_user_file(self._settings.storage_dir, user_id, name, value)

        self._id = user_id
        self._name = name
        self._balance = value
        logger.info("Created user id=%s name=%r", user_id, name)

    def load(self, user_id: int) -> None:
        """
        Replaces the in-memory state with the stored user `user_id`.

        Raises NotFoundError if there is no file for the id and
        CorruptRecordError if the file cannot be parsed.
        """
        validate_id(user_id)
        name, balance = storage.read_user_file(self._settings.storage_dir, user_id)
        self._id = user_id
        self._name = name
        self._balance = balance
        logger.debug("Loaded user id=%s", user_id)

    def save(self) -> None:
        """Overwrites the stored file; raises UninitializedStateError before create/load."""
        self._require_initialized()
        storage.write_user_file(self._settings.storage_dir, self._id, self._name, self._balance)
        logger.info("Saved user id=%s", self._id)

    def increase_balance(self, amount: float) -> None:
        """Adds amount (which may be negative) as long as the result stays >= 0."""
        self._require_initialized()
        new_balance = self._balance + _as_amount(amount, "Amount")
        self._balance = _checked_result(new_balance)

    def decrease_balance(self, amount: float) -> None:
        """Subtracts amount; the balance is left unchanged if the result would be negative."""
        self._require_initialized()
        new_balance = self._balance - _as_amount(amount, "Amount")
        self._balance = _checked_result(new_balance)

    def _require_initialized(self) -> None:
        if self._id is None:
            raise UninitializedStateError("User record is not initialized; call create() or load() first.")
