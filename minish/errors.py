"""Error reporting helpers and the exceptions used across the shell."""

from __future__ import annotations

import sys

SHELL_NAME = "shell"


class ShellExit(Exception):
    """Raised when the shell must terminate with a given status."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


class ShellSyntaxError(Exception):
    """Raised when a command line cannot be parsed."""

    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


def print_error(message: str | None) -> None:
    """Write ``message`` to standard error exactly as given."""
    if message:
        sys.stderr.write(message)
        sys.stderr.flush()


def shell_error(message: str) -> None:
    """Write ``message`` to standard error prefixed with the shell name."""
    print_error(f"{SHELL_NAME}: {message}\n")


def syntax_error_message(near: str | None) -> str:
    """Describe a syntax error at ``near``; ``None`` means end of line."""
    shown = "newline" if near is None else near
    return f"syntax error near unexpected token '{shown}'"