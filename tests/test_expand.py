from minish.environment import Environment
from minish.expand import expand_heredoc_line, expand_variables


def make_env():
    return Environment(["HOME=/home/user", "USER=alice", "_X=under"])


def test_plain_text_unchanged():
    assert expand_variables("hello world", make_env(), 0) == "hello world"


def test_expands_known_variable():
    assert expand_variables("$HOME", make_env(), 0) == "/home/user"


def test_expands_inside_text():
    assert expand_variables("dir=$HOME/src", make_env(), 0) == "dir=/home/user/src"


def test_unknown_variable_expands_to_nothing():
    assert expand_variables("a$NOPE", make_env(), 0) == "a"


def test_underscore_start_name():
    assert expand_variables("$_X", make_env(), 0) == "under"


def test_status_expansion():
    assert expand_variables("code $?", make_env(), 127) == "code 127"


def test_status_followed_by_text():
    assert expand_variables("$?$?", make_env(), 2) == "22"


def test_lone_and_trailing_dollar_kept():
    assert expand_variables("$", make_env(), 0) == "$"
    assert expand_variables("cost$", make_env(), 0) == "cost$"


def test_dollar_before_digit_kept():
    assert expand_variables("$1abc", make_env(), 0) == "$1abc"


def test_name_stops_at_non_name_char():
    assert expand_variables("$USER.txt", make_env(), 0) == "alice.txt"


def test_adjacent_variables():
    assert expand_variables("$USER$HOME", make_env(), 0) == "alice/home/user"


def test_heredoc_line_none_stays_none():
    assert expand_heredoc_line(None, make_env(), 0) is None


def test_heredoc_line_expanded():
    assert expand_heredoc_line("hi $USER", make_env(), 0) == "hi alice"


def test_heredoc_line_without_variables_unchanged():
    assert expand_heredoc_line("EOF", make_env(), 5) == "EOF"