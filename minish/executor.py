"""Running parsed commands: builtins in the shell, programs as children."""

from __future__ import annotations

import errno
import io
import os
import stat
import subprocess
import sys
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import BinaryIO, TextIO, Union

from .builtins import is_builtin, run_builtin
from .commands import Command
from .environment import Environment
from .errors import ShellExit, print_error
from .signals import restore_child_signals, set_foreground

PATH_MAX = 4096

_Source = Union[int, BinaryIO, None]
_Result = Union[int, "subprocess.Popen[bytes]"]


class CommandError(Exception):
    """A command that cannot be started; ``status`` is the exit status to report."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def _not_found(name: str) -> None:
    print_error(f"{name} : command not found\n")


def _search_path(env: Environment) -> str | None:
    for entry in env:
        if entry.startswith("PATH="):
            return entry[len("PATH="):]
    return None


def find_command(name: str, env: Environment) -> str | None:
    """Look ``name`` up in the directories of ``PATH``.

    Returns the first existing candidate, or ``None`` after reporting that
    the command was not found.
    """
    paths = _search_path(env)
    if paths and len(name) <= PATH_MAX // 2:
        directories = paths.split(":")
        if paths.endswith(":"):
            directories.pop()
        for directory in directories:
            candidate = f"{directory}/{name}"
            if os.path.exists(candidate):
                return candidate
    _not_found(name)
    return None


def resolve_command(name: str, env: Environment) -> str:
    """The path of the program to run for ``name``.

    Raises :class:`CommandError` with status 127 when it does not exist and
    126 when it cannot be executed or is not a regular file.
    """
    if "/" not in name:
        path = find_command(name, env)
    elif os.path.exists(name):
        path = name
    else:
        _not_found(name)
        path = None
    if path is None:
        raise CommandError(127)
    if not os.access(path, os.X_OK):
        print_error(f"{path}: {os.strerror(errno.EACCES)}\n")
        raise CommandError(126)
    if not stat.S_ISREG(os.stat(path).st_mode):
        print_error(f"{name} : Is a directory\n")
        raise CommandError(126)
    return path


@contextmanager
def _text_output(stream: BinaryIO) -> Iterator[TextIO]:
    wrapper = io.TextIOWrapper(stream, encoding="utf-8", write_through=True)
    try:
        yield wrapper
    finally:
        wrapper.flush()
        wrapper.detach()


def _release(source: _Source) -> None:
    if isinstance(source, int):
        if source >= 0:
            os.close(source)
    elif source is not None:
        source.close()


def _isolated_builtin(
    args: Sequence[str], env: Environment, exit_code: int, out: TextIO
) -> int:
    """Run a builtin as a pipeline stage, leaving the shell's state untouched."""
    scratch = Environment(env.entries())
    try:
        cwd: str | None = os.getcwd()
    except OSError:
        cwd = None
    try:
        return run_builtin(args, scratch, exit_code, out)
    except ShellExit as exc:
        return exc.code
    finally:
        if cwd is not None:
            os.chdir(cwd)


def _builtin_stage(
    command: Command, env: Environment, exit_code: int, last: bool
) -> tuple[_Result, _Source]:
    if command.outfile is not None:
        with _text_output(command.outfile) as out:
            status = _isolated_builtin(command.args, env, exit_code, out)
        return status, subprocess.DEVNULL
    if last:
        status = _isolated_builtin(command.args, env, exit_code, sys.stdout)
        sys.stdout.flush()
        return status, subprocess.DEVNULL
    buffer = tempfile.TemporaryFile("w+b")
    with _text_output(buffer) as out:
        status = _isolated_builtin(command.args, env, exit_code, out)
    buffer.seek(0)
    return status, buffer


def _spawn(
    command: Command,
    env: Environment,
    exit_code: int,
    stdin: _Source,
    last: bool,
) -> tuple[_Result, _Source]:
    try:
        path = resolve_command(command.args[0], env)
    except CommandError as exc:
        return exc.status, subprocess.DEVNULL
    read_end: int | None = None
    stdout: _Source
    if command.outfile is not None:
        stdout = command.outfile
    elif last:
        stdout = None
    else:
        read_end, stdout = os.pipe()
    try:
        process = subprocess.Popen(
            command.args,
            executable=path,
            stdin=stdin,
            stdout=stdout,
            env=env.to_envp(),
            preexec_fn=restore_child_signals,
        )
    except OSError as exc:
        print_error(f"{command.args[0]}: {exc.strerror}\n")
        if read_end is not None:
            os.close(read_end)
        return exit_code, subprocess.DEVNULL
    finally:
        if read_end is not None and isinstance(stdout, int):
            os.close(stdout)
    set_foreground(process.pid)
    return process, subprocess.DEVNULL if read_end is None else read_end


def _run_stage(
    command: Command,
    env: Environment,
    exit_code: int,
    stdin: _Source,
    last: bool,
) -> tuple[_Result, _Source]:
    if command.skip:
        return 1, subprocess.DEVNULL
    if not command.args:
        return 0, subprocess.DEVNULL
    if is_builtin(command.args[0]):
        return _builtin_stage(command, env, exit_code, last)
    return _spawn(command, env, exit_code, stdin, last)


def _run_pipeline(commands: Sequence[Command], env: Environment, exit_code: int) -> int:
    results: list[_Result] = []
    incoming: _Source = None
    sys.stdout.flush()
    try:
        for position, command in enumerate(commands):
            last = position == len(commands) - 1
            stdin = command.infile if command.infile is not None else incoming
            try:
                result, outgoing = _run_stage(command, env, exit_code, stdin, last)
            finally:
                _release(incoming)
                incoming = None
            results.append(result)
            incoming = outgoing
    finally:
        _release(incoming)
        for result in results:
            if isinstance(result, subprocess.Popen):
                result.wait()
    final = results[-1]
    if isinstance(final, subprocess.Popen):
        return final.returncode if final.returncode >= 0 else exit_code
    return final


def _run_single_builtin(command: Command, env: Environment, exit_code: int) -> int:
    if command.outfile is None:
        try:
            return run_builtin(command.args, env, exit_code)
        finally:
            sys.stdout.flush()
    with _text_output(command.outfile) as out:
        return run_builtin(command.args, env, exit_code, out)


def execute(commands: Sequence[Command], env: Environment, exit_code: int) -> int:
    """Run ``commands`` as one pipeline and return the new exit status.

    A lone builtin runs in the shell itself and may change ``env`` or raise
    :class:`ShellExit`; builtins inside a pipeline cannot. Every command's
    files are closed afterwards.
    """
    if not commands:
        return exit_code
    first = commands[0]
    try:
        if (
            len(commands) == 1
            and not first.skip
            and first.args
            and is_builtin(first.args[0])
        ):
            return _run_single_builtin(first, env, exit_code)
        return _run_pipeline(commands, env, exit_code)
    finally:
        for command in commands:
            command.close()
        set_foreground(0)