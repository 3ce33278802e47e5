"""Drive parsing, blaming and rendering over a whole patch."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from blamediff.config import Backend
from blamediff.diff.ranges import blame_ranges
from blamediff.git.blame import DEFAULT_REVISION, GitBlameProvider
from blamediff.git.utils import PathNotFoundError

from .renderer import AnnotatedRenderer

if TYPE_CHECKING:
	from collections.abc import Callable, Iterator

	from blamediff.config import BlameDiffConfig
	from blamediff.diff.schemas import BlameRecord, FileDiff, Patch
	from blamediff.git.blame import BlameProvider

logger = logging.getLogger(__name__)

FULL_HASH_WIDTH = 40


class AnnotationPipeline:
	"""
	Annotate every file of a patch.

	Files are independent: each one gets at most one blame call covering
	all of its hunks, and is rendered into its own buffer. With more than
	one job the files are processed on a thread pool, but results are
	always yielded in patch order.

	Error policy: a file missing from the base revision is rendered
	without attribution and reported through ``on_warning``. Any other
	error propagates out of :meth:`run` once the files before it have
	been yielded.

	"""

	def __init__(
		self,
		provider: BlameProvider,
		renderer: AnnotatedRenderer | None = None,
		revision: str = DEFAULT_REVISION,
		jobs: int = 1,
		on_warning: Callable[[str], None] | None = None,
	) -> None:
		"""
		Initialize the pipeline.

		Args:
		    provider: Source of line attribution
		    renderer: Renderer for each file, a default one if None
		    revision: Base revision the diff was taken against
		    jobs: Number of files processed concurrently
		    on_warning: Called with a message for every degraded file

		"""
		self.provider = provider
		self.renderer = renderer or AnnotatedRenderer()
		self.revision = revision
		self.jobs = max(1, jobs)
		self.on_warning = on_warning

	def blame_file(self, file_diff: FileDiff) -> list[BlameRecord] | None:
		"""
		Attribute the old lines of every hunk of ``file_diff``.

		Returns:
		    The records, or None if the file does not exist at the base revision

		"""
		ranges = blame_ranges(file_diff)
		if not ranges:
			# Nothing but insertions, no blame call needed
			return []

		try:
			return self.provider.blame(file_diff.old_path, ranges, self.revision)
		except PathNotFoundError as e:
			message = f"{file_diff.old_path}: {e}; showing it without attribution"
			logger.warning(message)
			if self.on_warning is not None:
				self.on_warning(message)
			return None

	def annotate_file(self, file_diff: FileDiff) -> str:
		"""Blame and render a single file."""
		records = self.blame_file(file_diff)
		return self.renderer.render(file_diff, records)

	def run(self, patch: Patch) -> Iterator[str]:
		"""Yield the annotated text of every file in patch order."""
		if self.jobs == 1 or len(patch) < 2:
			for file_diff in patch:
				yield self.annotate_file(file_diff)
			return

		logger.debug("Annotating %d files with %d jobs", len(patch), self.jobs)
		with ThreadPoolExecutor(max_workers=self.jobs) as executor:
			# map() hands back results in submission order
			yield from executor.map(self.annotate_file, patch.files)


def build_pipeline(config: BlameDiffConfig, on_warning: Callable[[str], None] | None = None) -> AnnotationPipeline:
	"""Create the provider, renderer and pipeline described by ``config``."""
	if config.backend is Backend.PYGIT2:
		# libgit2 bindings are only loaded when asked for
		from blamediff.git.libgit import Pygit2BlameProvider

		if config.blame_args:
			logger.warning("Ignoring git blame arguments with the pygit2 backend: %s", " ".join(config.blame_args))
		provider: BlameProvider = Pygit2BlameProvider(abbrev=config.effective_abbrev)
	else:
		provider = GitBlameProvider(git=config.git, abbrev=config.effective_abbrev, extra_args=config.blame_args)

	renderer = AnnotatedRenderer(
		revision_width=config.effective_abbrev or FULL_HASH_WIDTH,
		placeholder=config.placeholder,
	)
	return AnnotationPipeline(
		provider,
		renderer=renderer,
		revision=config.revision,
		jobs=config.jobs,
		on_warning=on_warning,
	)
