"""Grouping tokens into command segments: word runs, redirections and pipes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from minish.lexer import QuoteType, ShellSyntaxError, Token, TokenType


@dataclass
class Segment:
    """A run of words, one redirection with its target, or a pipe.

    For a redirection ``words`` is ``[operator, target]``; for a pipe it is
    ``["|"]``. ``quote`` is the quote of the last word in a word run.
    """

    type: TokenType
    words: list[str]
    quote: QuoteType = QuoteType.NONE


def _segments(tokens: Sequence[Token]) -> Iterator[Segment]:
    pos = 0
    count = len(tokens)
    while pos < count:
        token = tokens[pos]
        if token.type is TokenType.PIPE:
            yield Segment(TokenType.PIPE, ["|"])
            pos += 1
        elif token.type is TokenType.REDIRECT:
            if pos + 1 >= count:
                raise ShellSyntaxError("Error: redir not followed by word")
            yield Segment(TokenType.REDIRECT, [token.text, tokens[pos + 1].text])
            pos += 2
        else:
            end = pos
            while end < count and tokens[end].type is TokenType.WORD:
                end += 1
            run = tokens[pos:end]
            yield Segment(TokenType.WORD, [t.text for t in run], run[-1].quote)
            pos = end


def build_segments(tokens: Sequence[Token]) -> list[Segment]:
    """Group ``tokens`` into segments in the order they appear."""
    return list(_segments(tokens))


def count_commands(segments: Sequence[Segment]) -> int:
    """Number of word segments."""
    return sum(1 for segment in segments if segment.type is TokenType.WORD)


def command_words(segments: Sequence[Segment]) -> list[list[str]]:
    """The word lists of the word segments, in order."""
    return [list(s.words) for s in segments if s.type is TokenType.WORD]


def split_pipeline(segments: Sequence[Segment]) -> list[list[Segment]]:
    """Split the segments at each pipe; the pipes themselves are dropped."""
    if not segments:
        return []
    groups: list[list[Segment]] = [[]]
    for segment in segments:
        if segment.type is TokenType.PIPE:
            groups.append([])
        else:
            groups[-1].append(segment)
    return groups