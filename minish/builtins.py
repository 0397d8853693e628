"""Commands the shell runs itself: echo, cd, pwd, env, export, unset and exit."""

from __future__ import annotations

import os
from typing import Callable, Sequence, TextIO

from minish.environment import ShellState

BUILTIN_NAMES = frozenset({"exit", "echo", "cd", "pwd", "env", "unset", "export"})


class ShellExit(Exception):
    """Raised by ``exit`` to ask the shell to stop with ``status``."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: str) -> bool:
    """True when ``name`` is a command the shell runs itself."""
    return name in BUILTIN_NAMES


def builtin_echo(args: Sequence[str], state: ShellState, stdout: TextIO) -> int:
    """Print the arguments after ``args[0]`` separated by spaces.

    Every leading argument that starts with ``-`` is taken as an option and
    suppresses the trailing newline. With no arguments at all only a newline
    is written and the status is left as it was.
    """
    words = list(args[1:])
    if not words:
        stdout.write("\n")
        return 0
    newline = True
    while words and words[0].startswith("-"):
        newline = False
        words.pop(0)
    stdout.write(" ".join(words))
    if newline:
        stdout.write("\n")
    state.status = 0
    return 0


def _home(stderr: TextIO) -> str | None:
    home = os.environ.get("HOME")
    if home is None:
        stderr.write("cd: HOME undefined\n")
    return home


def builtin_cd(args: Sequence[str], state: ShellState, stderr: TextIO) -> int:
    """Change the working directory; ``~`` at the start means ``$HOME``."""
    if len(args) > 2:
        stderr.write("cd: too many arguments\n")
        return 1
    if len(args) < 2:
        path = _home(stderr)
        if path is None:
            return 1
    else:
        path = args[1]
        if path.startswith("~"):
            home = _home(stderr)
            if home is None:
                return 1
            path = home + path[1:]
    try:
        os.chdir(path)
    except OSError as exc:
        stderr.write(f"bash : cd: {path}: {exc.strerror}\n")
        code = 1
    else:
        code = 0
    state.status = code
    return code


def builtin_pwd(args: Sequence[str], state: ShellState, stdout: TextIO, stderr: TextIO) -> int:
    """Print the current working directory; arguments are ignored."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        stderr.write(f"PWD Error: {exc.strerror}\n")
        return 1
    stdout.write(f"{cwd}\n")
    state.status = 0
    return 0


def builtin_env(state: ShellState, stderr: TextIO) -> int:
    """List every variable as ``NAME=value``, one per line, on ``stderr``."""
    if len(state.env) == 0:
        return 0
    for entry in state.env.to_strings():
        stderr.write(f"{entry}\n")
    state.status = 0
    return 0


def builtin_export(args: Sequence[str], state: ShellState) -> int:
    """Set each ``NAME=value`` given after ``args[0]``."""
    state.env.export(args[1:])
    state.status = 0
    return 0


def builtin_unset(args: Sequence[str], state: ShellState) -> int:
    """Remove each variable named after ``args[0]``."""
    if len(state.env) == 0:
        return 0
    state.env.unset(args[1:])
    state.status = 0
    return 0


def builtin_exit(state: ShellState, stderr: TextIO) -> int:
    """Say goodbye and raise ShellExit with a status of 0."""
    stderr.write("Bisous mon chou <3\n")
    raise ShellExit(0)


def run_builtin(
    args: Sequence[str], state: ShellState, stdout: TextIO, stderr: TextIO
) -> int | None:
    """Run ``args`` as a builtin and return its status.

    Returns None when ``args`` is empty or does not name a builtin.
    """
    if not args or not is_builtin(args[0]):
        return None
    handlers: dict[str, Callable[[], int]] = {
        "exit": lambda: builtin_exit(state, stderr),
        "echo": lambda: builtin_echo(args, state, stdout),
        "cd": lambda: builtin_cd(args, state, stderr),
        "pwd": lambda: builtin_pwd(args, state, stdout, stderr),
        "env": lambda: builtin_env(state, stderr),
        "unset": lambda: builtin_unset(args, state),
        "export": lambda: builtin_export(args, state),
    }
    return handlers[args[0]]()