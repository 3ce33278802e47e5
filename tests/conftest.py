"""Global test fixtures and configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from textwrap import dedent

import pytest

from blamediff.diff.schemas import BlameRecord, LineRange
from blamediff.git.blame import DEFAULT_REVISION, BlameProvider
from blamediff.git.utils import BlameUnavailableError, PathNotFoundError

# A change to a 12 line file, old lines 6-11
SIMPLE_DIFF = dedent(
	"""\
	--- main.c
	+++ main.c
	@@ -6,6 +6,6 @@ int main(int argc, char const* argv[])
	     fprintf(stderr, "Too many arguments.\\n");
	     return -1;
	   }
	-  printf("Hello world!");
	+  printf("Hello world!\\n");
	   return 0;
	 }
	"""
)

TWO_FILE_DIFF = dedent(
	"""\
	--- lib.py
	+++ lib.py
	@@ -3,3 +3,3 @@ def helper():
	     a = 1
	-    b = 2
	+    b = 3
	     return a + b
	@@ -98,2 +98,3 @@ def other():
	     x = 1
	+    y = 2
	     return x
	--- main.py
	+++ main.py
	@@ -1,2 +1,2 @@
	-# main.py
	+# main module
	 import lib
	"""
)

NEW_FILE_DIFF = dedent(
	"""\
	--- /dev/null
	+++ new.py
	@@ -0,0 +1,2 @@
	+def new_func():
	+    pass
	"""
)


class FakeBlameProvider(BlameProvider):
	"""In-memory blame provider recording every call."""

	def __init__(self, revisions: dict[str, dict[int, str]], unavailable: set[str] | None = None) -> None:
		self.revisions = revisions
		self.unavailable = unavailable or set()
		self.calls: list[tuple[str, tuple[LineRange, ...], str]] = []

	def blame(self, path: str, ranges: Sequence[LineRange], revision: str = DEFAULT_REVISION) -> list[BlameRecord]:
		self.calls.append((path, tuple(ranges), revision))
		if path in self.unavailable:
			msg = f"cannot blame {path}"
			raise BlameUnavailableError(msg)
		if path not in self.revisions:
			msg = f"{path} does not exist at {revision}"
			raise PathNotFoundError(msg)

		lines = self.revisions[path]
		return [
			BlameRecord(revision=lines[n], line_no=n, text=f"line {n}")
			for r in ranges
			for n in range(r.start, r.end)
		]


@pytest.fixture
def simple_diff() -> str:
	"""Single hunk diff of main.c."""
	return SIMPLE_DIFF


@pytest.fixture
def two_file_diff() -> str:
	"""Diff touching lib.py (two hunks) and main.py."""
	return TWO_FILE_DIFF


@pytest.fixture
def new_file_diff() -> str:
	"""Diff adding a file that does not exist at the base revision."""
	return NEW_FILE_DIFF


@pytest.fixture
def simple_blame() -> dict[str, dict[int, str]]:
	"""Attribution of main.c lines 1-12: two commits split at line 9."""
	return {"main.c": {n: "8d4442c" if n < 9 else "bd7ee05" for n in range(1, 13)}}


@pytest.fixture
def fake_provider(simple_blame: dict[str, dict[int, str]]) -> FakeBlameProvider:
	"""Fake provider knowing main.c, lib.py and main.py."""
	revisions = dict(simple_blame)
	revisions["lib.py"] = {n: "1111111" if n < 50 else "2222222" for n in range(1, 120)}
	revisions["main.py"] = {1: "3333333", 2: "3333333"}
	return FakeBlameProvider(revisions)


@pytest.fixture
def provider_factory() -> type[FakeBlameProvider]:
	"""The fake provider class, for tests needing their own attribution."""
	return FakeBlameProvider


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
	"""Undo root logger changes made by setup_logging."""
	root = logging.getLogger()
	handlers = root.handlers[:]
	level = root.level
	yield
	for handler in root.handlers[:]:
		if handler not in handlers:
			handler.close()
	root.handlers[:] = handlers
	root.setLevel(level)
