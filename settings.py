"""
Configuration for the user store.

Values come from environment variables (optionally from a `.env` file) so the
record and CLI code never read os.environ directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MAX_ID = 100
DEFAULT_STORAGE_DIR = "users"


@dataclass(frozen=True)
class Settings:
    """Upper bound for generated ids and the directory holding user files."""

    max_id: int = DEFAULT_MAX_ID
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)

    def __post_init__(self) -> None:
        if isinstance(self.max_id, bool) or not isinstance(self.max_id, int) or self.max_id < 1:
            raise ValueError("max_id must be an integer >= 1.")
        # Accept plain strings for convenience.
        object.__setattr__(self, "storage_dir", Path(self.storage_dir))


def _int(value: str | None, default: int) -> int:
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    load_dotenv()
    return Settings(
        max_id=_int(os.getenv("USER_MAX_ID"), DEFAULT_MAX_ID),
        storage_dir=Path(os.getenv("USER_STORAGE_DIR") or DEFAULT_STORAGE_DIR),
    )
