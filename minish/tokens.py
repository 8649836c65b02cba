"""Splitting a command line into words and operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .errors import ShellSyntaxError
from .quoting import QUOTES

_SPACES = frozenset(" \n\r\f\t\v")


class TokenType(IntEnum):
    INPUT = 1
    HEREDOC = 2
    TRUNC = 3
    APPEND = 4
    PIPE = 5
    CMD = 6
    ARG = 7

    @property
    def is_operator(self) -> bool:
        return self <= TokenType.PIPE


_OPERATORS = (
    ("<<", TokenType.HEREDOC),
    (">>", TokenType.APPEND),
    ("<", TokenType.INPUT),
    (">", TokenType.TRUNC),
    ("|", TokenType.PIPE),
)

_OPERATOR_TEXT = {kind: text for text, kind in _OPERATORS}

_UNCLOSED = {
    TokenType.PIPE: "Error: Unclosed pipe",
    TokenType.APPEND: "Error: Unclosed append",
    TokenType.HEREDOC: "Error: Unclosed heredoc",
    TokenType.INPUT: "Error: Unclosed input",
    TokenType.TRUNC: "Error: Unclosed trunc",
}


@dataclass(frozen=True)
class Token:
    text: str
    type: TokenType

    @property
    def is_operator(self) -> bool:
        return self.type.is_operator


def is_space(char: str) -> bool:
    """Whether ``char`` is one of the whitespace characters that separate words."""
    return char in _SPACES


def special_at(text: str, index: int) -> TokenType | None:
    """The operator starting at ``text[index]``, if any."""
    for symbol, kind in _OPERATORS:
        if text.startswith(symbol, index):
            return kind
    return None


def _read_word(line: str, start: int) -> tuple[str, int]:
    pieces: list[str] = []
    index = start
    while index < len(line) and not is_space(line[index]) and special_at(line, index) is None:
        char = line[index]
        if char in QUOTES:
            close = line.find(char, index + 1)
            if close == -1:
                close = len(line)
            pieces.append(line[index + 1:close])
            index = min(close + 1, len(line))
        else:
            pieces.append(char)
            index += 1
    return "".join(pieces), index


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens, removing the quotes around quoted parts.

    A word is a command when it starts the line or follows a pipe, and an
    argument otherwise.
    """
    tokens: list[Token] = []
    index = 0
    while index < len(line):
        while index < len(line) and is_space(line[index]):
            index += 1
        if index >= len(line):
            break
        operator = special_at(line, index)
        if operator is not None:
            text = _OPERATOR_TEXT[operator]
            tokens.append(Token(text, operator))
            index += len(text)
            continue
        text, index = _read_word(line, index)
        if not tokens or tokens[-1].type is TokenType.PIPE:
            kind = TokenType.CMD
        else:
            kind = TokenType.ARG
        tokens.append(Token(text, kind))
    return tokens


def check_trailing_operator(tokens: list[Token]) -> None:
    """Raise :class:`ShellSyntaxError` when the line ends with an operator."""
    if tokens and tokens[-1].is_operator:
        raise ShellSyntaxError(_UNCLOSED[tokens[-1].type])