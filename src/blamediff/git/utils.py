"""Git utilities for git-blamediff."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(Exception):
	"""Custom exception for Git-related errors."""

	def __init__(self, message: str, stderr: str = "") -> None:
		"""
		Initialize the error.

		Args:
		    message: Human readable description
		    stderr: Error output of the failed git process, if any

		"""
		super().__init__(message)
		self.stderr = stderr


class PathNotFoundError(GitError):
	"""Raised when a file does not exist at the base revision."""


class BlameUnavailableError(GitError):
	"""Raised when blame information cannot be obtained for another reason."""


def run_git_command(command: list[str], cwd: Path | None = None) -> str:
	"""Run a Git command and return its output.

	Args:
	    command: Git command to run, executable included
	    cwd: Working directory (optional)

	Returns:
	    Command output as string

	Raises:
	    GitError: If the command fails or git cannot be executed
	"""
	logger.debug("Running: %s", " ".join(command))
	try:
		# Argument list without a shell, nothing here is interpolated
		result = subprocess.run(  # noqa: S603
			command,
			cwd=cwd,
			stdin=subprocess.DEVNULL,
			capture_output=True,
			encoding="utf-8",
			# File content in blame output need not be UTF-8
			errors="surrogateescape",
			check=True,
		)
	except FileNotFoundError as e:
		msg = f"Git executable not found: {command[0]}"
		raise GitError(msg) from e
	except subprocess.CalledProcessError as e:
		stderr = (e.stderr or "").strip()
		# First line of git's complaint is the useful part
		first_line = stderr.splitlines()[0] if stderr else f"exit status {e.returncode}"
		msg = f"Git command failed: {' '.join(command)}: {first_line}"
		logger.debug("git stderr: %s", stderr)
		raise GitError(msg, stderr=stderr) from e
	else:
		return result.stdout
