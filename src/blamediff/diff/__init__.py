"""Unified diff parsing and hunk range extraction."""

from .parser import DiffParseError, MalformedHunkError, parse_patch
from .ranges import blame_ranges, ranges_for
from .schemas import (
	AnnotatedLine,
	BlameRecord,
	FileDiff,
	Hunk,
	HunkLine,
	LineRange,
	LineTag,
	Patch,
)

__all__ = [
	"AnnotatedLine",
	"BlameRecord",
	"DiffParseError",
	"FileDiff",
	"Hunk",
	"HunkLine",
	"LineRange",
	"LineTag",
	"MalformedHunkError",
	"Patch",
	"blame_ranges",
	"parse_patch",
	"ranges_for",
]
