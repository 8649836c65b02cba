"""The interactive read-parse-run loop."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence

from .environment import Environment
from .errors import ShellExit, ShellSyntaxError, print_error
from .executor import execute
from .heredoc import LineReader, prompt_line
from .parser import is_blank, parse_line
from .signals import install_handlers

PROMPT = "minishell$ "


class Shell:
    """Shell state: the environment and the last exit status."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.env = Environment.from_mapping(os.environ if environ is None else environ)
        self.exit_code = 0
        self.reader: LineReader | None = None

    def run_line(self, line: str) -> int:
        """Parse and run one input line; return the resulting exit status.

        :class:`ShellExit` propagates when the line asks the shell to stop.
        """
        if is_blank(line):
            return self.exit_code
        try:
            commands = parse_line(line, self.env, self.exit_code, self.reader)
        except ShellSyntaxError as exc:
            print_error(f"{exc.message}\n")
            if exc.exit_code is not None:
                self.exit_code = exc.exit_code
            return self.exit_code
        if not commands:
            return self.exit_code
        self.exit_code = execute(commands, self.env, self.exit_code)
        return self.exit_code

    def loop(self, reader: LineReader | None = None) -> int:
        """Read and run lines until end of input or ``exit``; return the status."""
        read = reader or prompt_line
        self.reader = reader
        while True:
            try:
                line = read(PROMPT)
            except KeyboardInterrupt:
                continue
            if line is None:
                print_error("exit\n")
                return self.exit_code
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.code
            except KeyboardInterrupt:
                continue


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive shell on the process environment."""
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    install_handlers()
    shell = Shell()
    return shell.loop()