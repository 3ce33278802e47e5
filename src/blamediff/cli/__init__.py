"""Command-line interface package for git-blamediff."""

from __future__ import annotations

import logging
import sys

import typer

from blamediff import __version__

from .annotate_cmd import register_command as register_annotate_command

logger = logging.getLogger(__name__)

app = typer.Typer(
	help=f"git-blamediff - annotate a diff with the revisions that last changed its lines\n\nVersion: {__version__}",
	context_settings={"help_option_names": ["-h", "--help"]},
	add_completion=False,
)

register_annotate_command(app)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
