"""
Logging setup for git-blamediff.

Standard output carries the annotated diff, so every log record and every
summary printed here goes to standard error.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

# Console for diagnostics, kept off stdout
console = Console(stderr=True)

LOG_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


def setup_logging(is_verbose: bool = False, log_file_path: Path | str | None = None) -> None:
	"""
	Configure the root logger for one run.

	Records go to the stderr console through rich: warnings and errors by
	default, everything from ``LOG_LEVEL`` (``DEBUG`` if unset) up in
	verbose mode. A log file, when given, always receives debug records.

	Args:
	    is_verbose: Enable verbose logging
	    log_file_path: Optional file that receives a copy of every record

	"""
	level = os.environ.get("LOG_LEVEL", "DEBUG").upper() if is_verbose else "WARNING"

	root_logger = logging.getLogger()
	root_logger.setLevel(logging.DEBUG if log_file_path else level)
	# Repeated calls replace handlers instead of stacking them
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	root_logger.addHandler(
		RichHandler(
			console=console,
			level=level,
			rich_tracebacks=True,
			show_time=is_verbose,
			show_path=is_verbose,
		)
	)

	if log_file_path:
		_add_file_handler(root_logger, Path(log_file_path))


def _add_file_handler(root_logger: logging.Logger, path: Path) -> None:
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	except OSError:
		root_logger.exception("Cannot write log file %s", path)
		return

	file_handler.setLevel(logging.DEBUG)
	file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
	root_logger.addHandler(file_handler)
	root_logger.debug("Logging to file: %s", path)


def display_summary(title: str, message: str, style: str) -> None:
	"""
	Print ``message`` between two rules, the first one carrying ``title``.

	The message is printed without markup so that diff text and git output
	containing brackets are shown as is.

	"""
	console.print()
	console.print(Rule(Text(title, style=f"bold {style}"), style=style))
	console.print(f"\n{message}\n", markup=False)
	console.print(Rule(style=style))
	console.print()


def display_error_summary(error_message: str) -> None:
	"""Display an error summary on standard error."""
	display_summary("Error Summary", error_message, "red")


def display_warning_summary(warning_message: str) -> None:
	"""Display a warning summary on standard error."""
	display_summary("Warning Summary", warning_message, "yellow")
