import io
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

import cli
from settings import Settings
from user import UserRecord


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.settings = Settings(max_id=100, storage_dir=Path(self._tmp.name))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *answers: str) -> str:
        out = io.StringIO()
        with mock.patch("builtins.input", side_effect=list(answers)), redirect_stdout(out):
            cli.run(self.settings)
        return out.getvalue()

    def test_create_withdraw_save(self) -> None:
        output = self._run("1", "Alice", "100", "5", "30", "7", "3", "8")
        self.assertIn("Created user id=", output)
        self.assertIn("balance=70.00", output)
        self.assertIn("Goodbye.", output)

        files = list(Path(self._tmp.name).glob("*.txt"))
        self.assertEqual(len(files), 1)
        stored = UserRecord(self.settings)
        stored.load(int(files[0].stem))
        self.assertEqual((stored.name, stored.balance), ("Alice", 70.0))

    def test_errors_are_printed_and_loop_continues(self) -> None:
        output = self._run("4", "5", "2", "42", "1", "Bob", "-1", "8")
        self.assertIn("Error: User record is not initialized", output)
        self.assertIn("Error: User with id=42 does not exist.", output)
        self.assertIn("Error: Balance cannot be less than 0.", output)
        self.assertIn("Goodbye.", output)

    def test_input_is_reprompted(self) -> None:
        output = self._run("x", "3", "8")
        self.assertIn("Please enter a valid whole number", output)
        self.assertIn("No user loaded.", output)

    def test_log_level_from_environment(self) -> None:
        for raw, expected in (("debug", logging.DEBUG), ("foo", logging.WARNING), ("BASIC_FORMAT", logging.WARNING)):
            with self.subTest(raw=raw):
                with mock.patch.dict(os.environ, {"USER_STORE_LOG_LEVEL": raw}), mock.patch(
                    "cli.logging.basicConfig"
                ) as basic_config:
                    cli._configure_logging()
                self.assertEqual(basic_config.call_args.kwargs["level"], expected)

    def test_keyboard_interrupt_exits(self) -> None:
        out = io.StringIO()
        with mock.patch("builtins.input", side_effect=KeyboardInterrupt), redirect_stdout(out):
            cli.run(self.settings)
        self.assertIn("Exiting...", out.getvalue())


if __name__ == "__main__":
    unittest.main(verbosity=2)
