"""Expansion of ``$NAME`` and ``$?`` references."""

from __future__ import annotations

from dataclasses import dataclass

from .environment import Environment
from .quoting import QuoteState


@dataclass(frozen=True)
class VariableRef:
    """A ``$`` reference: its name, the index just past it, and its value."""

    name: str
    end: int
    value: str | None


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def _is_name_start(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalpha())


def _lookup(env: Environment, name: str) -> str | None:
    position = env.find_index(name)
    if position is None:
        return None
    return env.entries()[position].partition("=")[2]


def variable_match(line: str, index: int, env: Environment) -> VariableRef | None:
    """Recognise a variable reference starting at ``line[index]``.

    Returns ``None`` when the ``$`` there does not start a reference.
    The value is ``None`` for ``$?`` and for names not in ``env``.
    """
    if index + 1 >= len(line) or line[index] != "$":
        return None
    following = line[index + 1]
    if following == "?":
        return VariableRef("?", index + 2, None)
    if not _is_name_start(following):
        return None
    end = index + 1
    while end < len(line) and _is_name_char(line[end]):
        end += 1
    name = line[index + 1:end]
    return VariableRef(name, end, _lookup(env, name))


def expand_variables(line: str, env: Environment, exit_code: int) -> str:
    """Replace variable references outside single quotes; quotes are kept."""
    state = QuoteState()
    pieces: list[str] = []
    index = 0
    while index < len(line):
        char = line[index]
        state.feed(char)
        if char == "$" and not state.single:
            ref = variable_match(line, index, env)
            if ref is not None:
                if ref.name == "?":
                    pieces.append(str(exit_code))
                else:
                    pieces.append(ref.value or "")
                index = ref.end
                continue
        pieces.append(char)
        index += 1
    return "".join(pieces)