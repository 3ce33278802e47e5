"""Parse unified diff text into the structured Patch model."""

from __future__ import annotations

import logging
from io import StringIO

from unidiff import PatchSet
from unidiff.constants import (
	LINE_TYPE_ADDED,
	LINE_TYPE_NO_NEWLINE,
	LINE_TYPE_REMOVED,
	RE_HUNK_HEADER,
)
from unidiff.errors import UnidiffParseError

from .schemas import FileDiff, Hunk, HunkLine, LineTag, Patch

logger = logging.getLogger(__name__)

_TAGS = {
	LINE_TYPE_ADDED: LineTag.ADDED,
	LINE_TYPE_REMOVED: LineTag.REMOVED,
	LINE_TYPE_NO_NEWLINE: LineTag.NO_NEWLINE,
}


class DiffParseError(Exception):
	"""Raised when the input is not a unified diff we can understand."""


class MalformedHunkError(Exception):
	"""Raised when a parsed hunk violates its own line counts."""


def parse_patch(diff_text: str) -> Patch:
	"""
	Parse unified diff text into a Patch.

	Files without any hunk (binary changes, pure renames or mode changes)
	are dropped since there is nothing to annotate for them.

	Args:
	    diff_text: Output of ``git diff --relative --no-prefix`` or equivalent

	Returns:
	    The parsed Patch

	Raises:
	    DiffParseError: If the diff is syntactically broken

	"""
	try:
		patch_set = PatchSet(StringIO(diff_text))
	except UnidiffParseError as e:
		msg = f"Failed to parse diff: {e}"
		raise DiffParseError(msg) from e

	# unidiff keeps only the numbers of a header, so the raw lines are matched up in order
	headers = iter([line for line in diff_text.splitlines() if RE_HUNK_HEADER.match(line)])

	files = []
	for patched_file in patch_set:
		hunks = tuple(_convert_hunk(hunk, next(headers, "")) for hunk in patched_file)
		if patched_file.is_binary_file or len(patched_file) == 0:
			logger.debug("Skipping %s: no textual hunks", patched_file.path)
			continue
		files.append(
			FileDiff(
				old_path=patched_file.source_file,
				new_path=patched_file.target_file,
				hunks=hunks,
				old_timestamp=patched_file.source_timestamp,
				new_timestamp=patched_file.target_timestamp,
			)
		)

	if not files and diff_text.strip():
		logger.warning("No file diffs found in input")
	logger.debug("Parsed %d file diff(s)", len(files))
	return Patch(files=tuple(files))


def _convert_hunk(hunk, header_text: str) -> Hunk:  # noqa: ANN001
	lines = []
	for line in hunk:
		tag = _TAGS.get(line.line_type, LineTag.CONTEXT)
		text = "" if tag is LineTag.NO_NEWLINE else line.value.removesuffix("\n")
		old_line_no = line.source_line_no if tag.consumes_old_line else None
		lines.append(HunkLine(tag=tag, text=text, old_line_no=old_line_no))

	return Hunk(
		old_start=hunk.source_start,
		old_count=hunk.source_length,
		new_start=hunk.target_start,
		new_count=hunk.target_length,
		lines=tuple(lines),
		section_header=hunk.section_header or "",
		header_text=header_text,
	)
