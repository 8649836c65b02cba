"""Reading here-documents into a temporary file."""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from typing import BinaryIO

from .environment import Environment
from .errors import print_error
from .expand import expand_variables

LineReader = Callable[[str], "str | None"]

HEREDOC_PROMPT = "> "


def prompt_line(prompt: str) -> str | None:
    """Read one line from the terminal; ``None`` at end of input."""
    try:
        return input(prompt)
    except EOFError:
        return None


def read_heredoc(
    delimiter: str,
    env: Environment,
    exit_code: int,
    reader: LineReader | None = None,
) -> BinaryIO:
    """Collect lines until ``delimiter`` and return them as a readable file.

    Each line has its variables expanded. End of input ends the document
    with a warning. The returned file is positioned at its start.
    """
    read = reader or prompt_line
    document = tempfile.TemporaryFile("w+b")
    try:
        while True:
            line = read(HEREDOC_PROMPT)
            if line is None:
                print_error(
                    "warning: here-document delimited by end-of-file "
                    f"(wanted '{delimiter}')\n"
                )
                break
            if line == delimiter:
                break
            expanded = expand_variables(line, env, exit_code)
            document.write(expanded.encode() + b"\n")
        document.seek(0)
    except BaseException:
        document.close()
        raise
    return document