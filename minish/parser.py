"""From a raw input line to the commands to run."""

from __future__ import annotations

from .commands import Command, build_commands
from .environment import Environment
from .errors import ShellSyntaxError, syntax_error_message
from .expand import expand_variables
from .heredoc import LineReader
from .quoting import has_open_quote
from .tokens import TokenType, check_trailing_operator, is_space, tokenize


class ParseError(ShellSyntaxError):
    """A line that cannot be run.

    ``exit_code`` is ``None`` when the shell keeps its previous status.
    """

    def __init__(self, message: str, exit_code: int | None = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def is_blank(line: str) -> bool:
    """Whether ``line`` holds nothing but whitespace."""
    return all(is_space(char) for char in line)


def parse_line(
    line: str,
    env: Environment,
    exit_code: int,
    reader: LineReader | None = None,
) -> list[Command]:
    """Parse ``line`` into commands, opening redirections and here-documents.

    Returns an empty list when nothing is left to run after expansion.
    Raises :class:`ShellSyntaxError` (or :class:`ParseError`) on bad input.
    """
    if has_open_quote(line):
        raise ParseError("err : open quote")
    expanded = expand_variables(line, env, exit_code)
    tokens = tokenize(expanded)
    check_trailing_operator(tokens)
    if not tokens:
        return []
    commands = build_commands(tokens, env, exit_code, reader)
    if tokens[0].type is TokenType.PIPE:
        for command in commands:
            command.close()
        raise ParseError(syntax_error_message("|"), exit_code=None)
    return commands