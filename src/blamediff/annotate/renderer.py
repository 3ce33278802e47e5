"""Render a file diff with per-line attribution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blamediff.diff.schemas import AnnotatedLine

if TYPE_CHECKING:
	from collections.abc import Iterator, Sequence

	from blamediff.diff.schemas import BlameRecord, FileDiff, Hunk

logger = logging.getLogger(__name__)


class AnnotatedRenderer:
	"""
	Interleave blame records with the lines of a file diff.

	Context and removed lines are rendered as
	``<revision> <old line number>) <diff line>``. Added lines, and lines that
	have no attribution, get a blank field of the same width so that all
	diff lines of a file start in the same column.

	"""

	def __init__(self, revision_width: int = 7, placeholder: str = " ") -> None:
		"""
		Initialize the renderer.

		Args:
		    revision_width: Width of the revision column when a file has no records
		    placeholder: Character filling the revision column of unattributed lines

		"""
		self.revision_width = revision_width
		self.placeholder = placeholder

	def annotate(self, file_diff: FileDiff, records: Sequence[BlameRecord] | None) -> Iterator[AnnotatedLine]:
		"""
		Yield the annotated lines of every hunk in diff order.

		Args:
		    file_diff: The file to annotate
		    records: Blame records covering the old range of every hunk, or
		        None when the file could not be attributed

		"""
		by_line = {record.line_no: record for record in records or ()}
		for hunk in file_diff.hunks:
			yield from self._annotate_hunk(hunk, by_line if records is not None else None)

	def _annotate_hunk(self, hunk: Hunk, by_line: dict[int, BlameRecord] | None) -> Iterator[AnnotatedLine]:
		# Only context and removed lines advance through the base file
		cursor = hunk.old_start
		for line in hunk.lines:
			if not line.tag.consumes_old_line:
				yield AnnotatedLine(revision=None, line_no=None, text=line.diff_line)
				continue

			revision = by_line[cursor].revision if by_line is not None else None
			yield AnnotatedLine(revision=revision, line_no=cursor, text=line.diff_line)
			cursor += 1

	def render(self, file_diff: FileDiff, records: Sequence[BlameRecord] | None) -> str:
		"""
		Render the annotated text of one file, headers included.

		Returns:
		    Newline-terminated text of the whole file section

		"""
		annotated = list(self.annotate(file_diff, records))
		revision_width = max(
			(len(line.revision) for line in annotated if line.revision is not None),
			default=self.revision_width,
		)
		number_width = len(str(file_diff.max_old_line_no))
		blank_revision = self.placeholder * revision_width

		out = list(file_diff.header_lines)
		lines = iter(annotated)
		for hunk in file_diff.hunks:
			out.append(hunk.header)
			for _ in hunk.lines:
				line = next(lines)
				revision = blank_revision if line.revision is None else line.revision.ljust(revision_width)
				if line.line_no is None:
					prefix = f"{revision} {' ' * number_width}  "
				else:
					prefix = f"{revision} {line.line_no:>{number_width}}) "
				out.append(f"{prefix}{line.text}")

		return "\n".join(out) + "\n"


def render_file(
	file_diff: FileDiff,
	records: Sequence[BlameRecord] | None,
	revision_width: int = 7,
	placeholder: str = " ",
) -> str:
	"""Render ``file_diff`` with ``records`` using a default renderer."""
	return AnnotatedRenderer(revision_width=revision_width, placeholder=placeholder).render(file_diff, records)
