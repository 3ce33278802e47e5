"""Error and warning reporting for the git-blamediff command line."""

from __future__ import annotations

import logging

import typer

from blamediff.utils.log_setup import console, display_error_summary, display_warning_summary

logger = logging.getLogger(__name__)

# Lines of git's error output repeated in an error summary
MAX_STDERR_LINES = 5


def format_error(message: str, exception: Exception | None = None) -> str:
	"""
	Build the text of an error summary.

	Git failures carry git's own error output; its first lines are appended
	after the exception message unless they already are part of it.

	Args:
	    message: What the tool was doing when it failed
	    exception: Optional exception that caused the error

	"""
	if exception is None:
		return message

	text = f"{message}\n\nDetails: {exception!s}"
	stderr = getattr(exception, "stderr", "") or ""
	extra = [line for line in stderr.splitlines()[:MAX_STDERR_LINES] if line and line not in text]
	if extra:
		text += "\n" + "\n".join(f"  git: {line}" for line in extra)
	return text


def show_error(message: str, exception: Exception | None = None) -> None:
	"""Display an error summary, with the traceback logged at debug level."""
	if exception is not None:
		logger.debug("Error occurred", exc_info=exception)
	display_error_summary(format_error(message, exception))


def show_warning(message: str) -> None:
	"""Display a warning summary."""
	display_warning_summary(message)


def exit_with_error(message: str, exit_code: int = 1, exception: Exception | None = None) -> None:
	"""
	Display an error summary and leave with ``exit_code``.

	Raises:
	    typer.Exit: Always

	"""
	show_error(message, exception)
	raise typer.Exit(exit_code) from exception


def handle_keyboard_interrupt() -> None:
	"""Report an interrupted run and exit with the SIGINT status."""
	console.print("\n[yellow]Interrupted, the annotated diff may be incomplete.[/yellow]")
	raise typer.Exit(130)
