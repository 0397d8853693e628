"""Running parsed command lines: redirections, here-documents and pipelines."""

from __future__ import annotations

import copy
import io
import os
import subprocess
import sys
import threading
from dataclasses import dataclass, field
from typing import IO, Callable, Iterable, Optional, Protocol, Sequence, Union

from minish.builtins import ShellExit, is_builtin, run_builtin
from minish.commands import Segment, count_commands, split_pipeline
from minish.environment import ShellState
from minish.expand import expand_heredoc_line, expand_variables
from minish.lexer import QuoteType, TokenType

ReadLine = Callable[[str], Optional[str]]
_Input = Union[bytes, IO[bytes], None]

HEREDOC_PROMPT = "heredoc> "


class _Lookup(Protocol):
    def get(self, name: str) -> str | None: ...


def _read_stdin_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def search_path(env: _Lookup) -> list[str] | None:
    """Directories listed in ``PATH``, each ending with ``/``.

    Empty entries are skipped. Returns None when ``PATH`` is not set.
    """
    value = env.get("PATH")
    if value is None:
        return None
    return [f"{directory}/" for directory in value.split(":") if directory]


def find_executable(name: str, directories: Iterable[str] | None) -> str | None:
    """Locate ``name``: first as given, then joined to each directory in turn."""
    if os.access(name, os.F_OK | os.X_OK):
        return name
    for directory in directories or ():
        candidate = directory + name
        if os.access(candidate, os.F_OK | os.X_OK):
            return candidate
    return None


def _open_output(path: str, append: bool) -> IO[bytes]:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    return os.fdopen(os.open(path, flags, 0o644), "wb")


@dataclass
class Redirections:
    """Files and here-documents attached to one command.

    ``heredoc_input`` is True when the last input redirection was ``<<``;
    the input then comes from the last of ``heredocs`` rather than ``stdin``.
    Used as a context manager, it closes every file it opened.
    """

    stdin: Optional[IO[bytes]] = None
    stdout: Optional[IO[bytes]] = None
    heredocs: list[str] = field(default_factory=list)
    heredoc_input: bool = False
    _opened: list[IO[bytes]] = field(default_factory=list, repr=False)

    def close(self) -> None:
        """Close every file opened for this command."""
        for handle in self._opened:
            handle.close()
        self._opened.clear()

    def __enter__(self) -> "Redirections":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def collect_redirections(segments: Sequence[Segment]) -> Redirections:
    """Open the redirections of one command, stopping at the first pipe.

    Output files are created (or truncated) as they are met, so every
    ``>`` target exists afterwards even when a later one wins. Raises
    OSError when a file cannot be opened.
    """
    redirs = Redirections()
    try:
        for segment in segments:
            if segment.type is TokenType.PIPE:
                break
            if segment.type is not TokenType.REDIRECT:
                continue
            operator, target = segment.words[0], segment.words[1]
            if operator == "<":
                if redirs.stdin is not None:
                    redirs.stdin.close()
                redirs.stdin = open(target, "rb")
                redirs._opened.append(redirs.stdin)
                redirs.heredoc_input = False
            elif operator == "<<":
                redirs.heredocs.append(target)
                redirs.heredoc_input = True
            elif operator in (">", ">>"):
                if redirs.stdout is not None:
                    redirs.stdout.close()
                redirs.stdout = _open_output(target, append=operator == ">>")
                redirs._opened.append(redirs.stdout)
    except OSError:
        redirs.close()
        raise
    return redirs


def read_heredoc(delimiter: str, state: ShellState, read_line: ReadLine) -> str:
    """Read lines until ``delimiter`` or end of input, expanding variables.

    Each line is expanded before it is compared with the delimiter. The
    result holds every line followed by a newline.
    """
    lines: list[str] = []
    while True:
        line = expand_heredoc_line(read_line(HEREDOC_PROMPT), state.env, state.status)
        if line is None or line == delimiter:
            break
        lines.append(f"{line}\n")
    return "".join(lines)


def _discard(source: _Input) -> None:
    if source is not None and not isinstance(source, bytes):
        source.close()


def _feed(pipe: IO[bytes], data: bytes) -> None:
    try:
        pipe.write(data)
    except BrokenPipeError:
        pass
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


def _exit_status(returncode: int) -> int:
    return returncode if returncode >= 0 else 128 - returncode


class Executor:
    """Runs command segments against a shell state."""

    def __init__(self, state: ShellState, read_line: ReadLine | None = None) -> None:
        self.state = state
        self.read_line = read_line or _read_stdin_line
        self._processes: list[subprocess.Popen[bytes]] = []
        self._feeders: list[threading.Thread] = []

    def run(self, segments: Sequence[Segment]) -> int:
        """Run the segments of one command line and return the new status.

        A lone command naming a builtin runs inside the shell, so ``cd`` and
        ``export`` take effect; ``exit`` then raises ShellExit. In a pipeline
        every command runs on its own copy of the state.
        """
        segments = list(segments)
        if not segments:
            return self.state.status
        groups = split_pipeline(segments)
        if (
            len(groups) == 1
            and count_commands(segments) == 1
            and segments[0].type is TokenType.WORD
        ):
            args = self._expand(segments[0])
            if args and is_builtin(args[0]):
                run_builtin(args, self.state, sys.stdout, sys.stderr)
                sys.stdout.flush()
                return self.state.status
        self.state.status = self._run_pipeline(groups)
        return self.state.status

    def _expand(self, segment: Segment) -> list[str]:
        if segment.quote is QuoteType.SINGLE:
            return list(segment.words)
        return [
            expand_variables(word, self.state.env, self.state.status)
            for word in segment.words
        ]

    def _command_words(self, group: Sequence[Segment]) -> list[str]:
        words: list[str] = []
        for segment in group:
            if segment.type is TokenType.WORD:
                words.extend(self._expand(segment))
        return words

    def _run_pipeline(self, groups: Sequence[Sequence[Segment]]) -> int:
        self._processes = []
        self._feeders = []
        directories = search_path(self.state.env)
        previous: _Input = None
        result: Union[int, subprocess.Popen[bytes]] = self.state.status
        last = len(groups) - 1
        try:
            for index, group in enumerate(groups):
                try:
                    with collect_redirections(group) as redirs:
                        output, result = self._stage(
                            group, redirs, previous, index == last, directories
                        )
                except OSError as exc:
                    sys.stderr.write(f"bash: infile: : {exc.strerror}\n")
                    output, result = b"", 1
                finally:
                    _discard(previous)
                previous = output
        finally:
            _discard(previous)
            for feeder in self._feeders:
                feeder.join()
            for process in self._processes:
                process.wait()
        if isinstance(result, subprocess.Popen):
            return _exit_status(result.returncode)
        return result

    def _stage(
        self,
        group: Sequence[Segment],
        redirs: Redirections,
        previous: _Input,
        is_last: bool,
        directories: list[str] | None,
    ) -> tuple[_Input, Union[int, subprocess.Popen[bytes]]]:
        stdin_source: _Input = previous
        if redirs.heredoc_input:
            text = ""
            for delimiter in redirs.heredocs:
                text = read_heredoc(delimiter, self.state, self.read_line)
            stdin_source = text.encode()
        elif redirs.stdin is not None:
            stdin_source = redirs.stdin

        target: Union[IO[bytes], int, None]
        if redirs.stdout is not None:
            target = redirs.stdout
        elif is_last:
            target = None
        else:
            target = subprocess.PIPE

        words = self._command_words(group)
        if not words:
            return b"", 0
        if is_builtin(words[0]):
            return self._builtin_stage(words, target)
        return self._external_stage(words, stdin_source, target, directories)

    def _builtin_stage(
        self, words: list[str], target: Union[IO[bytes], int, None]
    ) -> tuple[_Input, int]:
        buffer = io.StringIO()
        state = copy.deepcopy(self.state)
        try:
            code = run_builtin(words, state, buffer, sys.stderr)
        except ShellExit as exc:
            code = exc.status
        text = buffer.getvalue()
        if target == subprocess.PIPE:
            return text.encode(), code or 0
        if target is None:
            sys.stdout.write(text)
            sys.stdout.flush()
        else:
            target.write(text.encode())  # type: ignore[union-attr]
        return b"", code or 0

    def _external_stage(
        self,
        words: list[str],
        stdin_source: _Input,
        target: Union[IO[bytes], int, None],
        directories: list[str] | None,
    ) -> tuple[_Input, Union[int, subprocess.Popen[bytes]]]:
        path = find_executable(words[0], directories)
        if path is None:
            if directories is None:
                sys.stderr.write(f"bash: {words[0]}: No such file or directory\n")
            else:
                sys.stderr.write(f"bash: {words[0]}: command not found\n")
            return b"", 127

        feed: bytes | None = None
        stdin_arg: Union[IO[bytes], int, None]
        if isinstance(stdin_source, bytes):
            if stdin_source:
                stdin_arg, feed = subprocess.PIPE, stdin_source
            else:
                stdin_arg = subprocess.DEVNULL
        else:
            stdin_arg = stdin_source

        sys.stdout.flush()
        sys.stderr.flush()
        try:
            process = subprocess.Popen(
                words,
                executable=path,
                env=dict(self.state.env),
                stdin=stdin_arg,
                stdout=target,
            )
        except OSError:
            return b"", 127
        self._processes.append(process)
        if feed is not None and process.stdin is not None:
            feeder = threading.Thread(target=_feed, args=(process.stdin, feed), daemon=True)
            feeder.start()
            self._feeders.append(feeder)
        output: _Input = process.stdout if target == subprocess.PIPE else b""
        return output, process