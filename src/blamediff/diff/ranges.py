"""Extract the base-file line ranges that need attribution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .parser import MalformedHunkError
from .schemas import LineRange

if TYPE_CHECKING:
	from .schemas import FileDiff, Hunk

logger = logging.getLogger(__name__)


def ranges_for(file_diff: FileDiff) -> list[LineRange]:
	"""
	Return the old-file range of every hunk of a file, in hunk order.

	Pure insertions yield a zero-width range. They are kept so the result
	lines up with ``file_diff.hunks``; callers must not blame them.

	Raises:
	    MalformedHunkError: If a hunk has an impossible range or its body
	        does not match its header counts

	"""
	return [_checked_range(file_diff.old_path, hunk) for hunk in file_diff.hunks]


def blame_ranges(file_diff: FileDiff) -> list[LineRange]:
	"""
	Return the non-empty ranges of a file merged into a minimal sorted set.

	Adjacent and overlapping hunk ranges are coalesced so that every line
	is requested from the blame facility exactly once.

	"""
	merged: list[LineRange] = []
	for current in sorted(r for r in ranges_for(file_diff) if not r.is_empty()):
		if merged and current.start <= merged[-1].end:
			last = merged[-1]
			merged[-1] = LineRange(last.start, max(last.end, current.end) - last.start)
		else:
			merged.append(current)

	if merged:
		logger.debug("Blame ranges for %s: %s", file_diff.old_path, merged)
	return merged


def _checked_range(path: str, hunk: Hunk) -> LineRange:
	if hunk.old_count < 0:
		msg = f"{path}: hunk '{hunk.header}' has a negative line count"
		raise MalformedHunkError(msg)
	if hunk.old_count > 0 and hunk.old_start < 1:
		msg = f"{path}: hunk '{hunk.header}' starts before line 1"
		raise MalformedHunkError(msg)

	old_lines = sum(1 for line in hunk.lines if line.tag.consumes_old_line)
	if old_lines != hunk.old_count:
		msg = f"{path}: hunk '{hunk.header}' declares {hunk.old_count} old line(s) but contains {old_lines}"
		raise MalformedHunkError(msg)
	return hunk.old_range
