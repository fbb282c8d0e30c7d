"""
File storage layer.

Keeps filesystem access isolated from the UserRecord logic. Each user lives in
`<storage_dir>/<id>.txt` holding two lines: the name, then the balance.
"""

from __future__ import annotations

import fcntl
import logging
import math
import os
import random
import re
from pathlib import Path
from typing import Optional, TextIO

from errors import ConflictError, CorruptRecordError, NotFoundError

logger = logging.getLogger(__name__)

FILE_SUFFIX = ".txt"
# Owner read/write, everyone else read.
FILE_MODE = 0o644


def generate_id(max_id: int, rng: Optional[random.Random] = None) -> int:
    """Draws a candidate id uniformly from [1, max_id]."""
    source = rng if rng is not None else random
    return source.randint(1, max_id)


def user_path(storage_dir: Path, user_id: int) -> Path:
    return Path(storage_dir) / f"{user_id}{FILE_SUFFIX}"


def format_balance(balance: float) -> str:
    # Whole amounts are written without a fractional part ("100", not "100.0").
    if balance.is_integer():
        return str(int(balance))
    return repr(balance)


def serialize(name: str, balance: float) -> str:
    return os.linesep.join((name, format_balance(balance)))


def deserialize(data: str, path: Path) -> tuple[str, float]:
    """Parses file content back into (name, balance)."""
    # Only "\n" and "\r\n" separate fields; a single trailing line break is ignored.
    fields = re.split(r"\r?\n", re.sub(r"\r?\n\Z", "", data))
    if len(fields) != 2:
        raise CorruptRecordError(f"{path}: expected 2 lines, found {len(fields)}.")

    name, raw_balance = fields
    if not name.strip():
        raise CorruptRecordError(f"{path}: name line is empty.")
    try:
        balance = float(raw_balance)
    except ValueError as e:
        raise CorruptRecordError(f"{path}: balance {raw_balance!r} is not a number.") from e
    if not math.isfinite(balance) or balance < 0:
        raise CorruptRecordError(f"{path}: balance {raw_balance!r} is out of range.")
    return name, balance


def _write_locked(f: TextIO, data: str) -> None:
    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
    try:
        # Truncate only once the lock is held so readers never see a half-cleared file.
        f.truncate(0)
        f.write(data)
        f.flush()
    finally:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def _open_for_write(fd: int) -> TextIO:
    # newline="" keeps os.linesep exactly as serialized.
    return os.fdopen(fd, "w", encoding="utf-8", newline="")


def create_user_file(storage_dir: Path, user_id: int, name: str, balance: float) -> Path:
    """
    Creates the storage file for a new id.

    The existence check and creation are one atomic call (O_CREAT | O_EXCL),
    so an existing file is never overwritten. If the write fails the new file
    is removed again, leaving the id free.
    """
    path = user_path(storage_dir, user_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, FILE_MODE)
    except FileExistsError as e:
        raise ConflictError(user_id) from e
    try:
        with _open_for_write(fd) as f:
            _write_locked(f, serialize(name, balance))
    except Exception:
        path.unlink(missing_ok=True)
        raise
    logger.debug("Created %s", path)
    return path


def write_user_file(storage_dir: Path, user_id: int, name: str, balance: float) -> Path:
    """Overwrites (or creates) the storage file for an id."""
    path = user_path(storage_dir, user_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT, FILE_MODE)
    with _open_for_write(fd) as f:
        _write_locked(f, serialize(name, balance))
    logger.debug("Wrote %s", path)
    return path


def read_user_file(storage_dir: Path, user_id: int) -> tuple[str, float]:
    path = user_path(storage_dir, user_id)
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise NotFoundError(user_id) from e
    return deserialize(data, path)
