"""Command annotating a unified diff with git blame information."""

import datetime
import logging
import os
import sys
from pathlib import Path
from typing import Annotated

import typer

from blamediff import __version__
from blamediff.config import MAX_ABBREV, MIN_ABBREV, Backend

logger = logging.getLogger(__name__)

# Diffs are bytes; undecodable bytes travel through as surrogates and are written back unchanged
DIFF_ENCODING = "utf-8"
DIFF_ERRORS = "surrogateescape"

# --- Command Argument Annotations ---

BlameArgs = Annotated[
	list[str] | None,
	typer.Argument(
		help="Additional arguments passed verbatim to git blame (e.g. -w, -M).",
		show_default=False,
	),
]

InputOpt = Annotated[
	Path | None,
	typer.Option(
		"--input",
		"-i",
		help="Read the diff from this file instead of standard input ('-' for stdin).",
		dir_okay=False,
	),
]

RevisionOpt = Annotated[
	str,
	typer.Option("--revision", "-r", help="Revision the diff was taken against."),
]

AbbrevOpt = Annotated[
	int,
	typer.Option("--abbrev", help="Number of hex digits shown per revision.", min=MIN_ABBREV, max=MAX_ABBREV),
]

LongFlag = Annotated[bool, typer.Option("--long", "-l", help="Show full revision ids.")]

JobsOpt = Annotated[int, typer.Option("--jobs", "-j", help="Number of files annotated concurrently.", min=1)]

BackendOpt = Annotated[
	Backend,
	typer.Option("--backend", help="Blame implementation to use.", case_sensitive=False),
]

GitOpt = Annotated[str, typer.Option("--git", help="Git executable.")]

PlaceholderOpt = Annotated[
	str,
	typer.Option("--placeholder", help="Character filling the revision column of added lines."),
]

VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]

SaveLogFlag = Annotated[
	bool,
	typer.Option("--save-log", help="Enable logging to a file. Logs to logs/blamediff_{datetime}.log."),
]


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"git-blamediff version: {__version__}")
		raise typer.Exit


VersionFlag = Annotated[
	bool | None,
	typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
]

# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the annotate command with the CLI app."""

	@app.command(
		name="annotate",
		context_settings={"ignore_unknown_options": True, "help_option_names": ["-h", "--help"]},
	)
	def annotate_command(
		blame_args: BlameArgs = None,
		input_path: InputOpt = None,
		revision: RevisionOpt = "HEAD",
		abbrev: AbbrevOpt = 7,
		long_hashes: LongFlag = False,
		jobs: JobsOpt = 1,
		backend: BackendOpt = Backend.GIT,
		git: GitOpt = "git",
		placeholder: PlaceholderOpt = " ",
		is_verbose: VerboseFlag = False,
		is_output_log: SaveLogFlag = False,
		_version: VersionFlag = None,
	) -> None:
		"""
		Annotate a unified diff with the revisions that last changed its lines.

		Feed it the output of `git diff --relative --no-prefix`. Context and
		removed lines are prefixed with the revision and base line number
		they come from; added lines are left unattributed.

		"""
		_annotate_command_impl(
			blame_args=blame_args or [],
			input_path=input_path,
			revision=revision,
			abbrev=abbrev,
			long_hashes=long_hashes,
			jobs=jobs,
			backend=backend,
			git=git,
			placeholder=placeholder,
			is_verbose=is_verbose,
			is_output_log=is_output_log,
		)


# --- Implementation Function ---


def _annotate_command_impl(
	blame_args: list[str],
	input_path: Path | None,
	revision: str,
	abbrev: int,
	long_hashes: bool,
	jobs: int,
	backend: Backend,
	git: str,
	placeholder: str,
	is_verbose: bool,
	is_output_log: bool,
) -> None:
	"""Actual implementation of the annotate command."""
	from pydantic import ValidationError

	from blamediff.annotate.pipeline import build_pipeline
	from blamediff.config import BlameDiffConfig
	from blamediff.diff.parser import DiffParseError, MalformedHunkError, parse_patch
	from blamediff.git.utils import GitError
	from blamediff.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, show_warning
	from blamediff.utils.log_setup import setup_logging

	log_file_path: Path | None = None
	if is_output_log:
		current_time = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path = Path("logs") / f"blamediff_{current_time}.log"
	setup_logging(is_verbose=is_verbose or is_output_log, log_file_path=log_file_path)

	try:
		config = BlameDiffConfig(
			revision=revision,
			abbrev=abbrev,
			long_hashes=long_hashes,
			jobs=jobs,
			backend=backend,
			git=git,
			placeholder=placeholder,
			blame_args=tuple(blame_args),
		)
	except ValidationError as e:
		exit_with_error("Invalid options.", exit_code=2, exception=e)
		return

	try:
		diff_text = _read_input(input_path)
	except OSError as e:
		exit_with_error(f"Failed to read diff from {input_path or 'standard input'}.", exception=e)
		return
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
		return

	try:
		patch = parse_patch(diff_text)
	except DiffParseError as e:
		exit_with_error("Input is not a unified diff git-blamediff can annotate.", exception=e)
		return

	pipeline = build_pipeline(config, on_warning=show_warning)
	out = sys.stdout.buffer
	try:
		for text in pipeline.run(patch):
			out.write(text.encode(DIFF_ENCODING, DIFF_ERRORS))
			out.flush()
	except BrokenPipeError:
		_silence_stdout()
	except MalformedHunkError as e:
		exit_with_error("The diff contains an inconsistent hunk.", exception=e)
	except GitError as e:
		exit_with_error("Failed to obtain blame information.", exception=e)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()


def _read_input(input_path: Path | None) -> str:
	"""Read the diff text from ``input_path`` or standard input."""
	if input_path is None or str(input_path) == "-":
		logger.debug("Reading diff from standard input")
		data = sys.stdin.buffer.read()
	else:
		logger.debug("Reading diff from %s", input_path)
		data = input_path.read_bytes()
	return data.decode(DIFF_ENCODING, DIFF_ERRORS)


def _silence_stdout() -> None:
	"""Point stdout at /dev/null after the reader went away."""
	logger.debug("Standard output closed, stopping")
	devnull = os.open(os.devnull, os.O_WRONLY)
	try:
		os.dup2(devnull, sys.stdout.fileno())
	finally:
		os.close(devnull)
