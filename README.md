# minish

`minish` is a small interactive shell. It reads a line and splits it into words
and operators. It expands variables and then runs the result, either as a builtin
or as an external program found on `PATH`.

## Installing

```
pip install .
```

## Running

```
minish
```

This starts an interactive prompt. Lines you enter are added to the readline
history when the `readline` module is available. Press Ctrl-D to leave, or type
`exit`. Ctrl-C at the prompt sets the status to 130 and gives a fresh prompt.

## What it understands

- Words separated by blanks. Single and double quotes group text into one word.
  The quote characters are removed, and quoted parts join onto the text next to
  them. An unclosed quote is reported as `Error: unclosed quote`.
- Pipes, for example `ls | grep py | wc -l`. Each stage runs as its own process
  with the shell's variables as its environment.
- Redirections: `< file`, `> file` (truncate) and `>> file` (append). Every
  output file named is created, even when a later one on the same command wins.
- Here-documents, for example `cat << END`. The shell prompts with `heredoc> `
  until it reads the delimiter line or the input ends, and expands variables in
  each line.
- Variable expansion: `$NAME`, and `$?` for the status of the last command. An
  unset variable expands to nothing. If the last word of a command was written
  in single quotes, no word of that command is expanded.
- Builtins:
  - `echo`. Every leading argument that starts with `-` is treated as an option
    and suppresses the trailing newline.
  - `cd`. With no argument it changes to `$HOME`, and a leading `~` also stands
    for `$HOME`. Both read the process environment.
  - `pwd`.
  - `env`. It prints `NAME=value` lines on standard error.
  - `export NAME=value ...` and `unset NAME ...`.
  - `exit`. It prints a goodbye and ends the session with status 0. Any
    arguments are ignored.

  A builtin that is the only command on the line runs inside the shell, so `cd`
  and `export` take effect. Inside a pipeline a builtin works on a copy of the
  shell state.
- A command that cannot be found is reported as `command not found` and sets
  the status to 127.
- A line made only of `/` and `.` is reported as a missing file and sets the
  status to 1. The lines `:` and `#` are skipped. The line `!` is skipped and
  sets the status to 1.

Syntax errors are reported on standard error. These include a line that starts
with `|`, a redirection not followed by a word, and a line that ends with `|` or
a redirection. Each of them sets the status to 2. Two pipes in a row and an
unclosed quote are also reported, but they leave the status unchanged.

## What it does not do

`minish` has no `;`, `&&` or `||` operators. It has no globbing, no backslash
escapes, no subshells and no job control. It cannot run scripts from a file. The
`minish` command only ever reads from the interactive prompt.

## Using it from Python

```python
from minish.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
shell.run_line("export GREETING=hello")
shell.run_line("echo $GREETING world")   # prints "hello world", returns 0
```

`Shell.run_line` returns the new status. It raises `minish.builtins.ShellExit`
when the line runs `exit`. `Shell.loop(read_line)` reads lines from any callable
that takes a prompt and returns a line, or `None` at the end of input.

The pieces are also usable on their own:

```python
from minish.lexer import split_words, check_token_order
from minish.commands import build_segments, split_pipeline
from minish.environment import Environment
from minish.expand import expand_variables

tokens = split_words("cat < in.txt | wc -l > out.txt")
check_token_order(tokens)          # raises ShellSyntaxError on bad input
segments = build_segments(tokens)
stages = split_pipeline(segments)  # one list of segments per command

env = Environment(["USER=alice"])
expand_variables("hi $USER, status $?", env, 0)  # 'hi alice, status 0'
```

`minish.executor` provides `Executor` for running segments. It also provides
`search_path`, `find_executable`, `collect_redirections` and `read_heredoc`.

## Running the tests

```
pip install .[test]
pytest
```