"""Splitting a command line into words, pipes and redirection operators."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

_WHITESPACE = frozenset("\t\n\v\f\r ")
_OPERATOR_CHARS = frozenset("|<>")
_QUOTES = {"'": "SINGLE", '"': "DOUBLE"}
_REDIRECTIONS = frozenset({"<", "<<", ">", ">>"})


class TokenType(enum.Enum):
    """Kind of a token on the command line."""

    PIPE = "pipe"
    REDIRECT = "redirect"
    WORD = "word"


class QuoteType(enum.Enum):
    """The last kind of quote seen inside a word."""

    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"


@dataclass(frozen=True)
class Token:
    """One word or operator of a command line."""

    text: str
    type: TokenType
    quote: QuoteType = QuoteType.NONE


class ShellSyntaxError(Exception):
    """A command line that cannot be run.

    ``status`` is the exit status the shell takes on, or None when the
    error leaves the previous status unchanged.
    """

    def __init__(self, message: str, status: int | None = 2) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def is_whitespace(char: str) -> bool:
    """True for a space or one of the characters tab through carriage return."""
    return len(char) == 1 and char in _WHITESPACE


def is_operator_char(char: str) -> bool:
    """True for ``|``, ``<`` and ``>``."""
    return len(char) == 1 and char in _OPERATOR_CHARS


def _classify(text: str) -> TokenType:
    if text == "|":
        return TokenType.PIPE
    if text in _REDIRECTIONS:
        return TokenType.REDIRECT
    return TokenType.WORD


def _read_operator(line: str, pos: int) -> tuple[str, int]:
    char = line[pos]
    if char in "<>" and line[pos + 1:pos + 2] == char:
        return char * 2, pos + 2
    return char, pos + 1


def _read_word(line: str, pos: int) -> tuple[str, QuoteType, int]:
    parts: list[str] = []
    quote = QuoteType.NONE
    length = len(line)
    while pos < length and not is_operator_char(line[pos]) and not is_whitespace(line[pos]):
        char = line[pos]
        if char in _QUOTES:
            close = line.find(char, pos + 1)
            if close == -1:
                raise ShellSyntaxError("Error: unclosed quote", status=None)
            parts.append(line[pos + 1:close])
            quote = QuoteType[_QUOTES[char]]
            pos = close + 1
        else:
            parts.append(char)
            pos += 1
    return "".join(parts), quote, pos


def split_words(line: str) -> list[Token]:
    """Split ``line`` into tokens.

    Quotes are removed and glued to the letters around them. Only the first
    token of the line is classified by its text alone, so a quoted ``|`` at
    the very start still counts as a pipe.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(line)
    while pos < length:
        char = line[pos]
        if is_whitespace(char):
            pos += 1
        elif is_operator_char(char):
            text, pos = _read_operator(line, pos)
            tokens.append(Token(text, _classify(text)))
        else:
            text, quote, pos = _read_word(line, pos)
            kind = _classify(text) if not tokens else TokenType.WORD
            tokens.append(Token(text, kind, quote))
    return tokens


def check_token_order(tokens: Sequence[Token]) -> None:
    """Raise ShellSyntaxError when pipes and redirections are misplaced."""
    if not tokens:
        return
    if tokens[0].type is TokenType.PIPE:
        raise ShellSyntaxError("bash: syntax error near unexpected token `|'")
    for current, following in zip(tokens, tokens[1:]):
        if current.type is TokenType.REDIRECT and following.type is not TokenType.WORD:
            raise ShellSyntaxError("Error: redir not followed by word")
        if current.type is TokenType.PIPE and following.type is TokenType.PIPE:
            raise ShellSyntaxError("Error: 2 pipes", status=None)
    if tokens[-1].type in (TokenType.PIPE, TokenType.REDIRECT):
        raise ShellSyntaxError("bash: syntax error near unexpected token `newline'")