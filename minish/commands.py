"""Turning a token list into commands with their redirections."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import BinaryIO

from .environment import Environment
from .errors import ShellSyntaxError, print_error, syntax_error_message
from .heredoc import LineReader, read_heredoc
from .tokens import Token, TokenType

_INPUTS = (TokenType.INPUT, TokenType.HEREDOC)
_OUTPUTS = (TokenType.TRUNC, TokenType.APPEND)

_OPEN_FLAGS = {
    TokenType.INPUT: (os.O_RDONLY, "rb"),
    TokenType.TRUNC: (os.O_CREAT | os.O_WRONLY | os.O_TRUNC, "wb"),
    TokenType.APPEND: (os.O_CREAT | os.O_WRONLY | os.O_APPEND, "ab"),
}


@dataclass
class Command:
    """One stage of a pipeline.

    ``skip`` is set when a redirection could not be opened; such a command
    is not run.
    """

    args: list[str] = field(default_factory=list)
    infile: BinaryIO | None = None
    outfile: BinaryIO | None = None
    skip: bool = False

    def close(self) -> None:
        """Close any redirection files the command holds."""
        for stream in (self.infile, self.outfile):
            if stream is not None:
                stream.close()
        self.infile = None
        self.outfile = None

    def __enter__(self) -> Command:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _segment(tokens: list[Token], start: int, lead_pipe_ends: bool) -> Iterator[int]:
    """Indices of the tokens of the stage beginning at ``start``."""
    if tokens[start].type is TokenType.PIPE:
        if lead_pipe_ends:
            return
    else:
        yield start
    index = start + 1
    while index < len(tokens) and tokens[index].type is not TokenType.PIPE:
        yield index
        index += 1


def collect_args(tokens: list[Token], start: int) -> list[str]:
    """The words of the stage at ``start`` that are not redirection targets."""
    args: list[str] = []
    for index in _segment(tokens, start, lead_pipe_ends=False):
        token = tokens[index]
        if token.type is TokenType.CMD or (
            token.type is TokenType.ARG
            and index > 0
            and not tokens[index - 1].is_operator
        ):
            args.append(token.text)
    return args


def _target(tokens: list[Token], index: int) -> str:
    following = index + 1
    if following >= len(tokens):
        raise ShellSyntaxError(syntax_error_message(None))
    if tokens[following].is_operator:
        raise ShellSyntaxError(syntax_error_message(tokens[following].text))
    return tokens[following].text


def _open(
    path: str,
    kind: TokenType,
    env: Environment,
    exit_code: int,
    reader: LineReader | None,
) -> BinaryIO | None:
    if kind is TokenType.HEREDOC:
        return read_heredoc(path, env, exit_code, reader)
    flags, mode = _OPEN_FLAGS[kind]
    try:
        descriptor = os.open(path, flags, 0o644)
    except OSError as exc:
        print_error(f"{path}: {exc.strerror}\n")
        return None
    return os.fdopen(descriptor, mode)


def _fill(
    command: Command,
    tokens: list[Token],
    start: int,
    env: Environment,
    exit_code: int,
    reader: LineReader | None,
) -> None:
    for index in _segment(tokens, start, lead_pipe_ends=True):
        kind = tokens[index].type
        if kind not in _INPUTS:
            continue
        if command.infile is not None:
            command.infile.close()
            command.infile = None
        stream = _open(_target(tokens, index), kind, env, exit_code, reader)
        if stream is None:
            command.skip = True
            return
        command.infile = stream

    for index in _segment(tokens, start, lead_pipe_ends=False):
        kind = tokens[index].type
        if kind not in _OUTPUTS:
            continue
        if command.outfile is not None:
            command.outfile.close()
            command.outfile = None
        stream = _open(_target(tokens, index), kind, env, exit_code, reader)
        if stream is None:
            if command.infile is not None:
                command.infile.close()
                command.infile = None
            command.skip = True
            return
        command.outfile = stream

    command.args = collect_args(tokens, start)


def build_commands(
    tokens: list[Token],
    env: Environment,
    exit_code: int,
    reader: LineReader | None = None,
) -> list[Command]:
    """Build one command per pipeline stage, opening its redirections.

    Raises :class:`ShellSyntaxError` when a redirection has no target;
    every file opened so far is closed first.
    """
    commands: list[Command] = []
    try:
        for start, token in enumerate(tokens):
            if start > 0 and tokens[start - 1].type is not TokenType.PIPE:
                continue
            command = Command()
            commands.append(command)
            _fill(command, tokens, start, env, exit_code, reader)
    except BaseException:
        for command in commands:
            command.close()
        raise
    return commands