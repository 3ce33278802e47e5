"""Runtime configuration for git-blamediff."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_ABBREV = 4
MAX_ABBREV = 64


class Backend(str, Enum):
	"""Available blame providers."""

	GIT = "git"  # one git blame process per file
	PYGIT2 = "pygit2"  # in-process libgit2


class BlameDiffConfig(BaseModel):
	"""
	Settings of a single run, assembled from command line options.

	There is no configuration file; git itself still honours its own
	configuration and environment.

	"""

	model_config = ConfigDict(extra="forbid", frozen=True)

	revision: str = "HEAD"
	"""Base revision the diff was taken against."""

	abbrev: int = Field(default=7, ge=MIN_ABBREV, le=MAX_ABBREV)
	"""Number of hex digits shown per revision."""

	long_hashes: bool = False
	"""Show full revision ids instead of abbreviated ones."""

	jobs: int = Field(default=1, ge=1)
	"""Number of files annotated concurrently."""

	backend: Backend = Backend.GIT

	git: str = "git"
	"""Git executable used by the git backend."""

	placeholder: str = " "
	"""Character filling the revision column of unattributed lines."""

	blame_args: tuple[str, ...] = ()
	"""Extra arguments forwarded verbatim to git blame."""

	@field_validator("revision", "git")
	@classmethod
	def _not_blank(cls, value: str) -> str:
		if not value.strip():
			msg = "must not be empty"
			raise ValueError(msg)
		return value

	@field_validator("placeholder")
	@classmethod
	def _single_character(cls, value: str) -> str:
		if len(value) != 1:
			msg = "must be exactly one character"
			raise ValueError(msg)
		return value

	@property
	def effective_abbrev(self) -> int | None:
		"""Digits to keep per revision id, None for full ids."""
		return None if self.long_hashes else self.abbrev
