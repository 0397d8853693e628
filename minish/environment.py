"""Shell environment variables and the mutable state shared by the shell."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator


def split_entry(entry: str) -> tuple[str, str]:
    """Split ``NAME=value`` into its name and value.

    An entry with no ``=`` has an empty value.
    """
    name, _, value = entry.partition("=")
    return name, value


class Environment:
    """Ordered collection of shell variables.

    Initial entries are stored newest first, so the last entry given ends up
    at the front. Variables added later by ``export`` go to the end.
    """

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._vars: dict[str, str] = {}
        for entry in reversed(list(entries)):
            name, value = split_entry(entry)
            # The entry given last wins, as it is found first by lookups.
            self._vars.setdefault(name, value)

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None when it is not set."""
        return self._vars.get(name)

    def export(self, args: Iterable[str]) -> None:
        """Set each ``NAME=value`` argument, updating existing names in place."""
        for arg in args:
            name, value = split_entry(arg)
            self._vars[name] = value

    def unset(self, names: Iterable[str]) -> None:
        """Remove each named variable; unknown names are ignored."""
        for name in names:
            self._vars.pop(name, None)

    def to_strings(self) -> list[str]:
        """Return the variables as ``NAME=value`` strings, in order."""
        return [f"{name}={value}" for name, value in self._vars.items()]

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Yield ``(name, value)`` pairs in order."""
        return iter(list(self._vars.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __repr__(self) -> str:
        return f"Environment({self.to_strings()!r})"


@dataclass
class ShellState:
    """Environment plus the exit status of the last command."""

    env: Environment = field(default_factory=Environment)
    status: int = 0