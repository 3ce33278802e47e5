"""Tests for running git subprocesses."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from blamediff.git.utils import BlameUnavailableError, GitError, PathNotFoundError, run_git_command


@pytest.mark.unit
@pytest.mark.git
class TestRunGitCommand:
	"""Tests for run_git_command."""

	def test_success(self) -> None:
		"""Standard output of the command is returned."""
		completed = MagicMock(stdout="abc\n")

		with patch("blamediff.git.utils.subprocess.run", return_value=completed) as mock_run:
			assert run_git_command(["git", "status"]) == "abc\n"

		args, kwargs = mock_run.call_args
		assert args[0] == ["git", "status"]
		assert kwargs["check"] is True
		assert kwargs["stdin"] is subprocess.DEVNULL
		assert kwargs["cwd"] is None

	def test_undecodable_output_is_kept(self) -> None:
		"""Output is decoded so that bytes which are not UTF-8 survive."""
		with patch("blamediff.git.utils.subprocess.run", return_value=MagicMock(stdout="")) as mock_run:
			run_git_command(["git", "blame"])

		kwargs = mock_run.call_args.kwargs
		assert kwargs["encoding"] == "utf-8"
		assert kwargs["errors"] == "surrogateescape"

	def test_failure_keeps_stderr(self) -> None:
		"""A failing command raises GitError carrying git's error output."""
		error = subprocess.CalledProcessError(
			128,
			["git", "blame"],
			stderr="fatal: bad revision 'nope'\nsecond line\n",
		)

		with (
			patch("blamediff.git.utils.subprocess.run", side_effect=error),
			pytest.raises(GitError, match="fatal: bad revision 'nope'$") as excinfo,
		):
			run_git_command(["git", "blame"])

		assert excinfo.value.stderr == "fatal: bad revision 'nope'\nsecond line"

	def test_failure_without_stderr(self) -> None:
		"""The exit status is reported when git printed nothing."""
		error = subprocess.CalledProcessError(1, ["git", "blame"])

		with (
			patch("blamediff.git.utils.subprocess.run", side_effect=error),
			pytest.raises(GitError, match="exit status 1"),
		):
			run_git_command(["git", "blame"])

	def test_missing_executable(self) -> None:
		"""A git binary that cannot be found is a GitError too."""
		with (
			patch("blamediff.git.utils.subprocess.run", side_effect=FileNotFoundError),
			pytest.raises(GitError, match="Git executable not found: nogit"),
		):
			run_git_command(["nogit", "blame"])


@pytest.mark.unit
def test_error_hierarchy() -> None:
	"""Both blame errors can be handled as GitError."""
	assert issubclass(PathNotFoundError, GitError)
	assert issubclass(BlameUnavailableError, GitError)
	assert GitError("boom").stderr == ""
