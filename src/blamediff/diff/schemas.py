"""Schema definitions for parsed diffs and blame results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

DEV_NULL = "/dev/null"
NO_NEWLINE_MARKER = "\\ No newline at end of file"


class LineTag(str, Enum):
	"""Classification of a single hunk line."""

	CONTEXT = " "
	REMOVED = "-"
	ADDED = "+"
	NO_NEWLINE = "\\"  # "\ No newline at end of file" marker

	@property
	def consumes_old_line(self) -> bool:
		"""Whether a line with this tag occupies a line of the base file."""
		return self in (LineTag.CONTEXT, LineTag.REMOVED)

	@property
	def consumes_new_line(self) -> bool:
		"""Whether a line with this tag occupies a line of the changed file."""
		return self in (LineTag.CONTEXT, LineTag.ADDED)


class LineRange(NamedTuple):
	"""A run of ``count`` lines starting at 1-based line ``start``."""

	start: int
	count: int

	@property
	def end(self) -> int:
		"""Exclusive end line."""
		return self.start + self.count

	def is_empty(self) -> bool:
		"""Whether the range covers no line at all."""
		return self.count == 0


@dataclass(frozen=True)
class HunkLine:
	"""One line of a hunk body."""

	tag: LineTag
	text: str
	old_line_no: int | None = None

	@property
	def diff_line(self) -> str:
		"""The line as it appears in the diff, tag character included."""
		if self.tag is LineTag.NO_NEWLINE:
			return NO_NEWLINE_MARKER
		return f"{self.tag.value}{self.text}"


@dataclass(frozen=True)
class Hunk:
	"""A contiguous block of changes within a file."""

	old_start: int
	old_count: int
	new_start: int
	new_count: int
	lines: tuple[HunkLine, ...]
	section_header: str = ""
	header_text: str = ""

	@property
	def old_range(self) -> LineRange:
		"""Lines of the base file covered by this hunk."""
		return LineRange(self.old_start, self.old_count)

	@property
	def header(self) -> str:
		"""The ``@@`` header line, verbatim when it was parsed from a diff."""
		if self.header_text:
			return self.header_text
		header = f"@@ -{_format_range(self.old_start, self.old_count)} +{_format_range(self.new_start, self.new_count)} @@"
		if self.section_header:
			header = f"{header} {self.section_header}"
		return header


@dataclass(frozen=True)
class FileDiff:
	"""All hunks of one file in a patch."""

	old_path: str
	new_path: str
	hunks: tuple[Hunk, ...]
	old_timestamp: str | None = None
	new_timestamp: str | None = None

	@property
	def is_added_file(self) -> bool:
		"""Whether the file does not exist in the base revision."""
		return self.old_path == DEV_NULL

	@property
	def is_removed_file(self) -> bool:
		"""Whether the change deletes the file."""
		return self.new_path == DEV_NULL

	@property
	def header_lines(self) -> tuple[str, str]:
		"""The ``---`` and ``+++`` lines introducing this file."""
		old = f"--- {self.old_path}"
		new = f"+++ {self.new_path}"
		if self.old_timestamp:
			old = f"{old}\t{self.old_timestamp}"
		if self.new_timestamp:
			new = f"{new}\t{self.new_timestamp}"
		return old, new

	@property
	def max_old_line_no(self) -> int:
		"""Largest base-file line number referenced by any hunk, 0 if none."""
		return max(
			(line.old_line_no for hunk in self.hunks for line in hunk.lines if line.old_line_no is not None),
			default=0,
		)


@dataclass(frozen=True)
class Patch:
	"""An ordered collection of file diffs."""

	files: tuple[FileDiff, ...]

	def __iter__(self):  # noqa: ANN204
		"""Iterate over the file diffs in patch order."""
		return iter(self.files)

	def __len__(self) -> int:
		"""Number of files in the patch."""
		return len(self.files)


@dataclass(frozen=True)
class BlameRecord:
	"""Attribution of one line of the base file."""

	revision: str
	line_no: int
	text: str


@dataclass(frozen=True)
class AnnotatedLine:
	"""A rendered hunk line with its attribution, if any."""

	revision: str | None
	line_no: int | None
	text: str


def _format_range(start: int, count: int) -> str:
	# git drops the count when it is exactly one
	if count == 1:
		return str(start)
	return f"{start},{count}"
