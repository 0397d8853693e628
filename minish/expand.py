"""Expansion of ``$NAME`` and ``$?`` in words and here-document lines."""

from __future__ import annotations

from typing import Protocol


class _Lookup(Protocol):
    def get(self, name: str) -> str | None: ...


def _is_name_start(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_name_char(char: str) -> bool:
    return _is_name_start(char) or ("0" <= char <= "9")


def expand_variables(text: str, env: _Lookup, status: int) -> str:
    """Replace ``$?`` with ``status`` and ``$NAME`` with its value.

    Unset variables expand to nothing. A ``$`` not followed by ``?``, a
    letter or an underscore is kept as it is.
    """
    parts: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        nxt = text[pos + 1] if pos + 1 < length else ""
        if char == "$" and nxt == "?":
            parts.append(str(status))
            pos += 2
        elif char == "$" and nxt and _is_name_start(nxt):
            end = pos + 1
            while end < length and _is_name_char(text[end]):
                end += 1
            value = env.get(text[pos + 1:end])
            if value is not None:
                parts.append(value)
            pos = end
        else:
            parts.append(char)
            pos += 1
    return "".join(parts)


def expand_heredoc_line(line: str | None, env: _Lookup, status: int) -> str | None:
    """Expand a line read for a here-document; None (end of input) stays None."""
    if line is None:
        return None
    return expand_variables(line, env, status)