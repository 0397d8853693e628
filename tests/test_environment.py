import pytest

from minish.environment import Environment, ShellState, split_entry


@pytest.mark.parametrize(
    "entry, expected",
    [
        ("HOME=/home/user", ("HOME", "/home/user")),
        ("EMPTY=", ("EMPTY", "")),
        ("NOVALUE", ("NOVALUE", "")),
        ("A=b=c", ("A", "b=c")),
    ],
)
def test_split_entry(entry, expected):
    assert split_entry(entry) == expected


def test_initial_entries_are_stored_newest_first():
    env = Environment(["A=1", "B=2", "C=3"])
    assert env.to_strings() == ["C=3", "B=2", "A=1"]


def test_get_returns_value_or_none():
    env = Environment(["PATH=/bin:/usr/bin"])
    assert env.get("PATH") == "/bin:/usr/bin"
    assert env.get("MISSING") is None


def test_duplicate_initial_entry_last_wins():
    env = Environment(["X=first", "X=second"])
    assert env.get("X") == "second"
    assert len(env) == 1


def test_export_appends_new_variable_at_end():
    env = Environment(["A=1", "B=2"])
    env.export(["NEW=value"])
    assert env.to_strings() == ["B=2", "A=1", "NEW=value"]
    assert len(env) == 3


def test_export_updates_existing_in_place():
    env = Environment(["A=1", "B=2"])
    env.export(["A=changed"])
    assert env.to_strings() == ["B=2", "A=changed"]


def test_export_without_equals_sets_empty_value():
    env = Environment()
    env.export(["FLAG"])
    assert env.get("FLAG") == ""
    assert env.to_strings() == ["FLAG="]


def test_export_into_empty_environment():
    env = Environment()
    env.export(["A=1", "B=2"])
    assert env.to_strings() == ["A=1", "B=2"]


def test_unset_removes_and_ignores_unknown():
    env = Environment(["A=1", "B=2", "C=3"])
    env.unset(["B", "NOPE"])
    assert env.get("B") is None
    assert env.to_strings() == ["C=3", "A=1"]
    assert len(env) == 2


def test_iter_yields_pairs_in_order():
    env = Environment(["A=1", "B=2"])
    assert list(env) == [("B", "2"), ("A", "1")]


def test_to_strings_round_trips_through_constructor():
    env = Environment(["A=1", "B=x=y", "C="])
    rebuilt = Environment(reversed(env.to_strings()))
    assert rebuilt.to_strings() == env.to_strings()


def test_contains():
    env = Environment(["A=1"])
    assert "A" in env
    assert "B" not in env


def test_shell_state_defaults():
    state = ShellState()
    assert state.status == 0
    assert len(state.env) == 0