"""The interactive loop: reading lines, filtering special input, running commands."""

from __future__ import annotations

import os
import signal
import sys
from typing import Callable, Iterable, Mapping, Optional, TextIO, Union

from minish.builtins import ShellExit
from minish.commands import build_segments
from minish.environment import Environment, ShellState
from minish.executor import Executor
from minish.lexer import ShellSyntaxError, check_token_order, split_words

try:
    import readline as _readline
except ImportError:  # pragma: no cover - platforms without GNU readline
    _readline = None

PROMPT = "\001\033[0;102m\002=>\001\033[0m\033[0;95m\002Mini-merde>$ \001\033[0m\002"

ReadLine = Callable[[str], Optional[str]]


def _only_slashes_and_dots(line: str) -> bool:
    if not line:
        return False
    return all(char in "/." for char in line.lstrip(" \t"))


def is_special_line(line: str, state: ShellState, stderr: TextIO) -> bool:
    """True when ``line`` must not be run as a command.

    A line made only of ``/`` and ``.`` (after leading blanks) is reported as
    a missing file and sets the status to 1. The lines ``:`` and ``#`` are
    skipped silently; ``!`` is skipped and sets the status to 1.
    """
    if _only_slashes_and_dots(line):
        stderr.write(f"bash: {line}: No such file or directory\n")
        state.status = 1
        return True
    if not line:
        return False
    if line in (":", "#"):
        return True
    if line == "!":
        state.status = 1
        return True
    return False


def _environment_entries(
    environ: Union[Mapping[str, str], Iterable[str], None]
) -> list[str]:
    if environ is None:
        environ = os.environ
    if isinstance(environ, Mapping):
        return [f"{name}={value}" for name, value in environ.items()]
    return list(environ)


def _add_history(line: str) -> None:
    if _readline is not None:
        _readline.add_history(line)


def _read_stdin_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """A shell session: its state and the executor that runs its commands."""

    def __init__(
        self, environ: Union[Mapping[str, str], Iterable[str], None] = None
    ) -> None:
        self.state = ShellState(Environment(_environment_entries(environ)))
        self.executor = Executor(self.state)

    def run_line(self, line: str) -> int:
        """Run one command line and return the resulting status.

        Syntax errors are reported on stderr. ``exit`` raises ShellExit.
        """
        if not line or is_special_line(line, self.state, sys.stderr):
            return self.state.status
        try:
            tokens = split_words(line)
            check_token_order(tokens)
        except ShellSyntaxError as exc:
            sys.stderr.write(f"{exc.message}\n")
            if exc.status is not None:
                self.state.status = exc.status
            return self.state.status
        if not tokens:
            return self.state.status
        return self.executor.run(build_segments(tokens))

    def loop(self, read_line: ReadLine | None = None) -> int:
        """Read and run lines until end of input or ``exit``; return the exit status."""
        reader = read_line or _read_stdin_line
        self.executor.read_line = reader
        while True:
            try:
                line = reader(PROMPT)
            except KeyboardInterrupt:
                sys.stderr.write("\n")
                self.state.status = signal.SIGINT + 128
                continue
            if line is None:
                return 0
            if not line:
                continue
            _add_history(line)
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.status
            except KeyboardInterrupt:
                sys.stdout.write("\n")
                sys.stdout.flush()
                self.state.status = 130


def main(argv: list[str] | None = None) -> int:
    """Start an interactive session on the process environment."""
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    shell = Shell(os.environ)
    return shell.loop(_read_stdin_line)