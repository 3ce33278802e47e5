"""Tests for logging setup and CLI helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from rich.logging import RichHandler

from blamediff.git.utils import GitError
from blamediff.utils.cli_utils import (
	exit_with_error,
	format_error,
	handle_keyboard_interrupt,
	show_error,
	show_warning,
)
from blamediff.utils.log_setup import console, setup_logging


@pytest.mark.unit
class TestSetupLogging:
	"""Tests for setup_logging."""

	def test_quiet_by_default(self) -> None:
		"""Only warnings and errors are shown without verbose mode."""
		with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
			setup_logging(is_verbose=False)

		root = logging.getLogger()
		assert root.level == logging.WARNING
		assert len(root.handlers) == 1
		assert isinstance(root.handlers[0], RichHandler)

	def test_verbose(self) -> None:
		"""Verbose mode logs debug output."""
		with patch.dict(os.environ, {}, clear=True):
			setup_logging(is_verbose=True)

		assert logging.getLogger().level == logging.DEBUG

	def test_verbose_honours_log_level(self) -> None:
		"""LOG_LEVEL picks the verbose level."""
		with patch.dict(os.environ, {"LOG_LEVEL": "info"}):
			setup_logging(is_verbose=True)

		assert logging.getLogger().level == logging.INFO

	def test_handlers_are_replaced(self) -> None:
		"""Calling setup twice does not duplicate handlers."""
		setup_logging()
		setup_logging()

		assert len(logging.getLogger().handlers) == 1

	def test_log_file(self, tmp_path: Path) -> None:
		"""A log file receives debug records."""
		log_file = tmp_path / "logs" / "run.log"

		setup_logging(is_verbose=True, log_file_path=log_file)
		logging.getLogger("blamediff.test").debug("hello from the test")
		for handler in logging.getLogger().handlers:
			handler.flush()

		assert log_file.exists()
		assert "hello from the test" in log_file.read_text(encoding="utf-8")

	def test_console_is_stderr(self) -> None:
		"""Diagnostics never go to standard output."""
		assert console.stderr


@pytest.mark.unit
class TestCliHelpers:
	"""Tests for the error and warning helpers."""

	def test_show_warning(self) -> None:
		"""Warnings are printed as a summary."""
		with patch("blamediff.utils.cli_utils.display_warning_summary") as mock_display:
			show_warning("careful")

		mock_display.assert_called_once_with("careful")

	def test_show_error_with_exception(self) -> None:
		"""The exception text is appended to the error message."""
		with patch("blamediff.utils.cli_utils.display_error_summary") as mock_display:
			show_error("It failed.", ValueError("bad value"))

		mock_display.assert_called_once_with("It failed.\n\nDetails: bad value")

	def test_git_output_is_appended(self) -> None:
		"""Git's own error lines follow the details."""
		error = GitError("Git command failed", stderr="fatal: bad object abc\nhint: check the revision")

		text = format_error("Failed to obtain blame information.", error)

		assert text.splitlines() == [
			"Failed to obtain blame information.",
			"",
			"Details: Git command failed",
			"  git: fatal: bad object abc",
			"  git: hint: check the revision",
		]

	def test_git_output_not_repeated(self) -> None:
		"""Lines already in the exception message are not shown twice."""
		error = GitError("Git command failed: fatal: bad object abc", stderr="fatal: bad object abc")

		assert "  git:" not in format_error("Failed.", error)

	def test_exit_with_error(self) -> None:
		"""Exiting raises typer.Exit with the requested code."""
		with (
			patch("blamediff.utils.cli_utils.display_error_summary"),
			pytest.raises(typer.Exit) as excinfo,
		):
			exit_with_error("Invalid options.", exit_code=2)

		assert excinfo.value.exit_code == 2

	def test_keyboard_interrupt(self) -> None:
		"""Interrupts exit with the conventional SIGINT code."""
		with patch.object(console, "print"), pytest.raises(typer.Exit) as excinfo:
			handle_keyboard_interrupt()

		assert excinfo.value.exit_code == 130
