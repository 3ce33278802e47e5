"""Line attribution through libgit2, without spawning git processes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import Commit, GitError as LibGit2Error, discover_repository
from pygit2.repository import Repository

from blamediff.diff.schemas import BlameRecord

from .blame import DEFAULT_REVISION, BlameProvider, abbreviate, check_coverage
from .utils import BlameUnavailableError, PathNotFoundError

if TYPE_CHECKING:
	from collections.abc import Sequence

	from blamediff.diff.schemas import LineRange

logger = logging.getLogger(__name__)


class Pygit2BlameProvider(BlameProvider):
	"""
	Attribute lines with ``pygit2.Repository.blame``.

	The repository is discovered from ``cwd`` on first use. Paths handed to
	:meth:`blame` are relative to ``cwd``, matching ``git diff --relative``.

	"""

	def __init__(self, abbrev: int | None = 7, cwd: Path | None = None) -> None:
		"""Initialize the provider."""
		self.abbrev = abbrev
		self.cwd = cwd
		self._repo: Repository | None = None

	@property
	def repo(self) -> Repository:
		"""The repository containing ``cwd``."""
		if self._repo is None:
			start = self.cwd or Path.cwd()
			git_dir = discover_repository(str(start))
			if git_dir is None:
				msg = f"Not a git repository: {start}"
				raise BlameUnavailableError(msg)
			self._repo = Repository(git_dir)
		return self._repo

	def _repo_path(self, path: str) -> str:
		workdir = self.repo.workdir
		if workdir is None:
			msg = "Cannot blame relative paths in a bare repository"
			raise BlameUnavailableError(msg)
		absolute = ((self.cwd or Path.cwd()) / path).resolve()
		return absolute.relative_to(Path(workdir).resolve()).as_posix()

	def blame(self, path: str, ranges: Sequence[LineRange], revision: str = DEFAULT_REVISION) -> list[BlameRecord]:
		"""Attribute the requested lines from the repository's object database."""
		if not ranges:
			return []

		repo_path = self._repo_path(path)
		try:
			commit = self.repo.revparse_single(revision).peel(Commit)
		except (KeyError, ValueError, LibGit2Error) as e:
			msg = f"Cannot resolve revision {revision}: {e}"
			raise BlameUnavailableError(msg) from e

		try:
			blob = commit.tree[repo_path]
		except KeyError as e:
			msg = f"{path} does not exist at {revision}"
			raise PathNotFoundError(msg) from e
		lines = blob.data.decode("utf-8", errors="replace").split("\n")

		records: list[BlameRecord] = []
		for line_range in ranges:
			try:
				blame = self.repo.blame(
					repo_path,
					newest_commit=commit.id,
					min_line=line_range.start,
					max_line=line_range.end - 1,
				)
			except (KeyError, ValueError, LibGit2Error) as e:
				msg = f"Failed to blame {path} lines {line_range.start}-{line_range.end - 1}: {e}"
				raise BlameUnavailableError(msg) from e

			for hunk in blame:
				sha = str(hunk.final_commit_id)
				revision_id = abbreviate(sha, self.abbrev, boundary=hunk.boundary)
				first = hunk.final_start_line_number
				for line_no in range(first, first + hunk.lines_in_hunk):
					if line_range.start <= line_no < line_range.end and line_no <= len(lines):
						records.append(BlameRecord(revision=revision_id, line_no=line_no, text=lines[line_no - 1]))

		records.sort(key=lambda record: record.line_no)
		check_coverage(path, ranges, records)
		logger.debug("Attributed %d line(s) of %s at %s via libgit2", len(records), path, revision)
		return records
