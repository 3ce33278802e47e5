"""Line attribution through ``git blame``."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from blamediff.diff.schemas import BlameRecord, LineRange

from .utils import BlameUnavailableError, GitError, PathNotFoundError, run_git_command

if TYPE_CHECKING:
	from collections.abc import Iterable, Sequence
	from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_REVISION = "HEAD"

# "<sha> <orig line> <final line>[ <lines in group>]", sha-1 or sha-256
PORCELAIN_HEADER_RE = re.compile(r"^([0-9a-f]{40}|[0-9a-f]{64}) (\d+) (\d+)(?: (\d+))?$")
NO_SUCH_PATH_RE = re.compile(r"no such path", re.IGNORECASE)


class BlameProvider:
	"""Base class for anything able to attribute lines of a file at a revision."""

	def blame(self, path: str, ranges: Sequence[LineRange], revision: str = DEFAULT_REVISION) -> list[BlameRecord]:
		"""
		Attribute every line of the given ranges.

		Args:
		    path: File path relative to the current directory
		    ranges: Non-empty line ranges of the file at ``revision``
		    revision: Revision to attribute against

		Returns:
		    One record per requested line, ordered by line number

		Raises:
		    PathNotFoundError: If ``path`` does not exist at ``revision``
		    BlameUnavailableError: If attribution fails for any other reason

		"""
		raise NotImplementedError

	def blame_range(
		self, path: str, old_start: int, old_count: int, revision: str = DEFAULT_REVISION
	) -> list[BlameRecord]:
		"""Attribute the ``old_count`` lines starting at ``old_start``."""
		if old_count == 0:
			return []
		return self.blame(path, [LineRange(old_start, old_count)], revision)


def abbreviate(sha: str, abbrev: int | None, *, boundary: bool = False) -> str:
	"""Shorten a commit id, marking boundary commits with a caret like git does."""
	short = sha if abbrev is None else sha[:abbrev]
	return f"^{short}" if boundary else short


def parse_porcelain(output: str, abbrev: int | None = 7) -> list[BlameRecord]:
	"""
	Parse ``git blame --porcelain`` output.

	Args:
	    output: Raw porcelain output
	    abbrev: Number of hex digits to keep, ``None`` for full ids

	Returns:
	    Records sorted by line number

	"""
	records: dict[int, BlameRecord] = {}
	boundaries: set[str] = set()
	sha: str | None = None
	line_no = 0

	for line in output.splitlines():
		if line.startswith("\t"):
			if sha is None:
				continue
			records[line_no] = BlameRecord(
				revision=abbreviate(sha, abbrev, boundary=sha in boundaries),
				line_no=line_no,
				text=line[1:],
			)
			sha = None
			continue

		match = PORCELAIN_HEADER_RE.match(line)
		if match:
			sha = match.group(1)
			line_no = int(match.group(3))
		elif line == "boundary" and sha is not None:
			boundaries.add(sha)

	return [records[key] for key in sorted(records)]


def check_coverage(path: str, ranges: Iterable[LineRange], records: Sequence[BlameRecord]) -> None:
	"""
	Ensure ``records`` attribute every line of ``ranges``.

	Raises:
	    BlameUnavailableError: If any requested line is missing

	"""
	covered = {record.line_no for record in records}
	for line_range in ranges:
		missing = [n for n in range(line_range.start, line_range.end) if n not in covered]
		if missing:
			msg = (
				f"Blame output for {path} does not cover lines "
				f"{line_range.start}-{line_range.end - 1} (first missing: {missing[0]})"
			)
			raise BlameUnavailableError(msg)


class GitBlameProvider(BlameProvider):
	"""Attribute lines by running one ``git blame`` per file."""

	def __init__(
		self,
		git: str = "git",
		abbrev: int | None = 7,
		extra_args: Sequence[str] = (),
		cwd: Path | None = None,
	) -> None:
		"""
		Initialize the provider.

		Args:
		    git: Git executable
		    abbrev: Hex digits of the reported revision ids, ``None`` for full ids
		    extra_args: Additional arguments passed verbatim to ``git blame``
		    cwd: Directory git runs in, the current one if None

		"""
		self.git = git
		self.abbrev = abbrev
		self.extra_args = tuple(extra_args)
		self.cwd = cwd

	def build_command(self, path: str, ranges: Sequence[LineRange], revision: str) -> list[str]:
		"""Build the blame command line for all ``ranges`` of ``path``."""
		command = [self.git, "--no-pager", "blame", "--porcelain"]
		command.extend(f"-L{r.start},+{r.count}" for r in ranges)
		command.extend(self.extra_args)
		command.extend([revision, "--", path])
		return command

	def blame(self, path: str, ranges: Sequence[LineRange], revision: str = DEFAULT_REVISION) -> list[BlameRecord]:
		"""Run ``git blame`` once for every range of ``path``."""
		if not ranges:
			return []

		command = self.build_command(path, ranges, revision)
		try:
			output = run_git_command(command, cwd=self.cwd)
		except GitError as e:
			if NO_SUCH_PATH_RE.search(e.stderr):
				msg = f"{path} does not exist at {revision}"
				raise PathNotFoundError(msg, stderr=e.stderr) from e
			raise BlameUnavailableError(str(e), stderr=e.stderr) from e

		records = parse_porcelain(output, self.abbrev)
		check_coverage(path, ranges, records)
		logger.debug("Attributed %d line(s) of %s at %s", len(records), path, revision)
		return records
