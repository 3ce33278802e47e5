"""Git utilities for git-blamediff."""

from blamediff.git.blame import BlameProvider, GitBlameProvider, parse_porcelain
from blamediff.git.utils import BlameUnavailableError, GitError, PathNotFoundError, run_git_command

__all__ = [
	"BlameProvider",
	"BlameUnavailableError",
	"GitBlameProvider",
	"GitError",
	"PathNotFoundError",
	"parse_porcelain",
	"run_git_command",
]
