"""Signal handling for the interactive shell."""

from __future__ import annotations

import os
import signal
import sys
from dataclasses import dataclass
from types import FrameType


@dataclass
class _Foreground:
    pid: int = 0


_foreground = _Foreground()


def set_foreground(pid: int) -> None:
    """Record the process the shell is waiting on; 0 means none."""
    _foreground.pid = pid


def foreground_pid() -> int:
    """The process the shell is currently waiting on, or 0."""
    return _foreground.pid


def _say(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def handle_sigint(signum: int, frame: FrameType | None) -> None:
    """Start a fresh prompt line.

    With no child running, the pending read is interrupted so the prompt
    is shown again.
    """
    _say("\n")
    if _foreground.pid == 0:
        raise KeyboardInterrupt


def handle_sigtstp(signum: int, frame: FrameType | None) -> None:
    """Stop the running child, or ignore the request when there is none."""
    pid = _foreground.pid
    if pid > 0:
        _say(f"\n[Minishell] Processus suspendu : {pid}\n")
        os.kill(pid, signal.SIGSTOP)
    else:
        _say("\n[Minishell] Ignore CTRL+Z\n")


def _handle_sigabrt(signum: int, frame: FrameType | None) -> None:
    _say("abort\n")


def install_handlers() -> None:
    """Install the handlers the interactive shell runs with."""
    signal.signal(signal.SIGINT, handle_sigint)
    signal.signal(signal.SIGABRT, _handle_sigabrt)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    signal.signal(signal.SIGTSTP, handle_sigtstp)


def restore_child_signals() -> None:
    """Give a child process the default quit behaviour back."""
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)