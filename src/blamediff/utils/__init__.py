"""Utility module for git-blamediff."""

from .cli_utils import exit_with_error, handle_keyboard_interrupt, show_error, show_warning
from .log_setup import console, setup_logging

__all__ = [
	"console",
	"exit_with_error",
	"handle_keyboard_interrupt",
	"setup_logging",
	"show_error",
	"show_warning",
]
