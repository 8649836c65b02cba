"""The commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterable, Sequence
from typing import TextIO

from .environment import Environment
from .errors import ShellExit, print_error

BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})

_LONG_MAX = 2**63 - 1
_WORD_MASK = 2**64 - 1
_MAX_DIGITS = 20
_C_SPACES = frozenset("\t\n\v\f\r ")
_DIGITS = "0123456789"


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def is_builtin(name: str | None) -> bool:
    """Whether ``name`` is handled by the shell itself."""
    return name in BUILTINS


def _is_no_newline_flag(arg: str) -> bool:
    # A dash followed only by 'n' characters; a lone dash counts too.
    return arg.startswith("-") and all(char == "n" for char in arg[1:])


def echo(args: Sequence[str], out: TextIO | None = None) -> int:
    """Print the arguments separated by spaces; leading ``-n`` flags drop the newline."""
    stream = _stream(out)
    words = list(args[1:])
    newline = True
    while words and _is_no_newline_flag(words[0]):
        words.pop(0)
        newline = False
    stream.write(" ".join(words))
    if newline:
        stream.write("\n")
    return 0


def _update_directories(env: Environment, previous: str | None) -> None:
    if previous is not None:
        env.export(f"OLDPWD={previous}")
    try:
        current = os.getcwd()
    except OSError as exc:
        print_error(f"cd: {exc.strerror}\n")
        return
    env.export(f"PWD={current}")


def cd(args: Sequence[str], env: Environment) -> int:
    """Change the working directory, to ``HOME`` with no argument or ``~``."""
    if len(args) == 1 or (len(args) == 2 and args[1] == "~"):
        path = env.get("HOME")
        if path is None:
            sys.stdout.write("cd: HOME not set\n")
            return 1
    elif len(args) == 2:
        path = args[1]
    else:
        return 1
    try:
        previous: str | None = os.getcwd()
    except OSError:
        previous = None
    try:
        os.chdir(path)
    except OSError as exc:
        print_error(f"{path}: {exc.strerror}\n")
        return 1
    _update_directories(env, previous)
    return 0


def pwd(out: TextIO | None = None) -> int:
    """Print ``PWD`` from the process environment, or the working directory."""
    stream = _stream(out)
    current = os.environ.get("PWD")
    if current:
        stream.write(f"{current}\n")
        return 0
    try:
        current = os.getcwd()
    except OSError as exc:
        print_error(f"pwd: {exc.strerror}\n")
        return 1
    stream.write(f"{current}\n")
    return 0


def sort_entries(entries: Iterable[str]) -> list[str]:
    """Environment entries in character order."""
    return sorted(entries)


def _valid_export_name(arg: str) -> bool:
    if not arg or (arg[0] != "_" and not _is_ascii_alpha(arg[0])):
        return False
    name = arg.partition("=")[0]
    return all(_is_name_char(char) for char in name)


def _declare(entry: str) -> str:
    key, sep, value = entry.partition("=")
    if sep:
        return f'declare -x {key}="{value}"\n'
    return f"declare -x {key}\n"


def export(args: Sequence[str], env: Environment, out: TextIO | None = None) -> int:
    """Set variables, or list them all in sorted order when given none."""
    if len(args) <= 1:
        stream = _stream(out)
        for entry in sort_entries(env):
            stream.write(_declare(entry))
        return 0
    status = 0
    for arg in args[1:]:
        if not _valid_export_name(arg):
            print_error("export: invalid identifier\n")
            status = 1
        else:
            env.export(arg)
    return status


def _valid_unset_name(name: str) -> bool:
    if name[0] != "_" and not _is_ascii_alpha(name[0]):
        return False
    return all(_is_name_char(char) for char in name)


def unset(args: Sequence[str], env: Environment) -> int:
    """Remove variables; every word of the command line is taken as a name."""
    status = 0
    for name in args:
        if not name:
            continue
        if not _valid_unset_name(name):
            print_error("unset: invalid identifier\n")
            status = 1
            continue
        env.unset(name)
    return status


def print_env(env: Environment, out: TextIO | None = None) -> int:
    """Print every entry that has a value."""
    stream = _stream(out)
    for entry in env:
        if "=" in entry:
            stream.write(f"{entry}\n")
    return 0


def parse_exit_code(text: str) -> int:
    """Read an ``exit`` argument as a status from 0 to 255.

    Raises :class:`ValueError` when the text is not a number that fits in
    a signed 64-bit integer.
    """
    index = 0
    length = len(text)
    while index < length and text[index] in _C_SPACES:
        index += 1
    sign = 1
    if index < length and text[index] in "+-":
        if text[index] == "-":
            sign = -1
        index += 1
    start = index
    value = 0
    while index < length and text[index] in _DIGITS:
        value = (value * 10 + int(text[index])) & _WORD_MASK
        index += 1
    while index < length and text[index] in _C_SPACES:
        index += 1
    invalid = (
        index < length
        or index - start > _MAX_DIGITS
        or (sign == -1 and ((value - 1) & _WORD_MASK) > _LONG_MAX)
        or (sign == 1 and value > _LONG_MAX)
    )
    if invalid:
        raise ValueError(f"numeric argument required: {text!r}")
    return (value * sign) % 256


def exit_builtin(args: Sequence[str], exit_code: int) -> int:
    """Leave the shell by raising :class:`ShellExit`.

    With more than one argument nothing happens and 1 is returned.
    """
    status = 0
    if len(args) > 1:
        try:
            status = parse_exit_code(args[1])
        except ValueError:
            print_error(f"exit: {args[1]}: numeric argument required\n")
            raise ShellExit(2) from None
    if len(args) > 2:
        print_error("exit: too many arguments\n")
        return 1
    if len(args) == 1:
        raise ShellExit(exit_code)
    raise ShellExit(status)


def run_builtin(
    args: Sequence[str],
    env: Environment,
    exit_code: int,
    out: TextIO | None = None,
) -> int:
    """Run the builtin named by ``args[0]`` and return the new exit status."""
    if not args:
        return exit_code
    handlers: dict[str, Callable[[], int]] = {
        "echo": lambda: echo(args, out),
        "cd": lambda: cd(args, env),
        "pwd": lambda: pwd(out),
        "export": lambda: export(args, env, out),
        "unset": lambda: unset(args, env),
        "env": lambda: print_env(env, out),
        "exit": lambda: exit_builtin(args, exit_code),
    }
    handler = handlers.get(args[0])
    if handler is None:
        return exit_code
    return handler()