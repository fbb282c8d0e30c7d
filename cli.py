"""
Command-line interface (CLI) for the user store.

A small menu loop around a single UserRecord. Library errors are caught here
and printed; the record and storage layers never catch them.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from errors import UserStoreError
from settings import Settings, get_settings
from user import UserRecord


def _prompt_non_empty(prompt: str) -> str:
    # Keep prompting until user provides a non-empty string.
    while True:
        value = input(prompt).strip()
        if value:
            return value
        print("Input cannot be empty. Please try again.")


def _prompt_int(prompt: str, *, min_value: Optional[int] = None) -> int:
    while True:
        raw = input(prompt).strip()
        try:
            value = int(raw)
        except ValueError:
            print("Please enter a valid whole number (integer).")
            continue

        if min_value is not None and value < min_value:
            print(f"Please enter a value >= {min_value}.")
            continue

        return value


def _prompt_amount(prompt: str) -> float:
    while True:
        raw = input(prompt).strip()
        try:
            return float(raw)
        except ValueError:
            print("Please enter a valid number (e.g., 10 or 2.50).")


def _print_user(record: UserRecord) -> None:
    if not record.is_initialized:
        print("No user loaded.")
        return
    print(f"- id={record.id} | name={record.name} | balance={record.balance:.2f}")


def _configure_logging() -> None:
    level = getattr(logging, os.getenv("USER_STORE_LOG_LEVEL", "WARNING").upper(), None)
    # Unknown names fall back to WARNING.
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def run(settings: Optional[Settings] = None) -> None:
    settings = settings if settings is not None else get_settings()

    print("User Balance Store")
    print("------------------")
    print(f"Storage directory: {settings.storage_dir}")

    record = UserRecord(settings)

    try:
        while True:
            print("\nMenu:")
            print(" 1) Create user")
            print(" 2) Load user by id")
            print(" 3) Show current user")
            print(" 4) Deposit (increase balance)")
            print(" 5) Withdraw (decrease balance)")
            print(" 6) Rename user")
            print(" 7) Save")
            print(" 8) Exit")

            choice = _prompt_int("Choose an option: ", min_value=1)

            try:
                if choice == 1:
                    name = _prompt_non_empty("Name: ")
                    balance = _prompt_amount("Opening balance (>= 0): ")
                    record.create(name, balance)
                    print(f"Created user id={record.id}.")

                elif choice == 2:
                    user_id = _prompt_int("User id: ", min_value=1)
                    record.load(user_id)
                    _print_user(record)

                elif choice == 3:
                    _print_user(record)

                elif choice == 4:
                    record.increase_balance(_prompt_amount("Amount: "))
                    print("Balance updated (not saved yet).")

                elif choice == 5:
                    record.decrease_balance(_prompt_amount("Amount: "))
                    print("Balance updated (not saved yet).")

                elif choice == 6:
                    record.name = _prompt_non_empty("New name: ")
                    print("Name updated (not saved yet).")

                elif choice == 7:
                    record.save()
                    print("Saved.")

                elif choice == 8:
                    print("Goodbye.")
                    return

                else:
                    print("Invalid choice. Please try again.")

            except UserStoreError as e:
                print(f"Error: {e}")

    except KeyboardInterrupt:
        print("\nExiting...")
    except OSError as e:
        print(f"Fatal storage error: {e}")


def main() -> None:
    _configure_logging()
    run()


if __name__ == "__main__":
    main()
