import pytest

from minish.commands import (
    Segment,
    build_segments,
    command_words,
    count_commands,
    split_pipeline,
)
from minish.lexer import QuoteType, ShellSyntaxError, Token, TokenType, split_words


def segments_of(line):
    return build_segments(split_words(line))


def test_simple_command():
    segments = segments_of("ls -l")
    assert segments == [Segment(TokenType.WORD, ["ls", "-l"], QuoteType.NONE)]


def test_redirect_and_pipe_segments():
    segments = segments_of("cat < in -n | wc -l")
    assert [s.type for s in segments] == [
        TokenType.WORD,
        TokenType.REDIRECT,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
    ]
    assert segments[1].words == ["<", "in"]
    assert segments[3].words == ["|"]
    assert segments[2].words == ["-n"]


def test_count_commands_counts_word_runs():
    segments = segments_of("cat < in -n | wc -l")
    assert count_commands(segments) == len(command_words(segments))
    assert command_words(segments) == [["cat"], ["-n"], ["wc", "-l"]]


def test_word_run_takes_last_quote():
    segments = segments_of("echo 'a' \"b\"")
    assert segments[0].quote is QuoteType.DOUBLE
    assert segments[0].words == ["echo", "a", "b"]


def test_split_pipeline():
    segments = segments_of("a 1 | b > out | c")
    groups = split_pipeline(segments)
    assert len(groups) == 3
    assert all(s.type is not TokenType.PIPE for g in groups for s in g)
    assert sum(len(g) for g in groups) == len(segments) - 2
    assert groups[1][1].words == [">", "out"]


def test_split_pipeline_empty():
    assert split_pipeline([]) == []
    assert count_commands([]) == 0


def test_words_copied():
    segments = segments_of("echo hi")
    words = command_words(segments)
    words[0].append("extra")
    assert segments[0].words == ["echo", "hi"]


def test_redirect_without_target():
    with pytest.raises(ShellSyntaxError):
        build_segments([Token("ls", TokenType.WORD), Token(">", TokenType.REDIRECT)])
    assert build_segments([]) == []