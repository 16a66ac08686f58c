"""Magic-link token matcher.

Recognizes a ``{payload}`` span starting exactly at a cursor position in
the host's inline source.  The payload is single-line and may not
contain any of ``{ } [ ] ( )``, so a token never swallows a nested
Markdown link or another token.

The character right after the closing brace is inspected but not
consumed.  A token followed by ``(`` or ``[`` is left alone so that
constructs like ``{x}(y)`` stay untouched.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

OPEN_BRACE: Final[str] = "{"
CLOSE_BRACE: Final[str] = "}"

_PAYLOAD_STOP: Final[frozenset[str]] = frozenset("{[]()\n")
_TRAILING_STOP: Final[frozenset[str]] = frozenset("[]{}()")


@dataclass(frozen=True, slots=True)
class TokenMatch:
    """A matched magic-link token.

    Parameters
    ----------
    payload:
        Text between the braces, untouched.
    start:
        Offset of the opening brace.
    end:
        Offset just past the closing brace.
    trailing:
        The character after the closing brace, or ``""`` at end of input.
    """

    payload: str
    start: int
    end: int
    trailing: str

    @property
    def length(self) -> int:
        """Number of characters the host should consume."""
        return self.end - self.start


class TokenMatcher:
    """Scanner for a single token at a given offset.

    Parameters
    ----------
    source:
        The complete inline source text.
    """

    __slots__ = ("_source",)

    def __init__(self, source: str) -> None:
        self._source: str = source

    def _char(self, pos: int) -> str:
        """Return the character at ``pos``, or ``""`` past the end."""
        return self._source[pos] if pos < len(self._source) else ""

    def match(self, pos: int) -> TokenMatch | None:
        """Return the token starting at ``pos``, or ``None``.

        Returns
        -------
        TokenMatch | None
            ``None`` when there is no brace at ``pos``, the payload hits a
            forbidden character or the end of input before ``}``, or the
            trailing character is a bracket, brace or parenthesis.
        """
        if self._char(pos) != OPEN_BRACE:
            return None

        cursor = pos + 1
        while True:
            ch = self._char(cursor)
            if ch == "" or ch in _PAYLOAD_STOP:
                return None
            if ch == CLOSE_BRACE:
                break
            cursor += 1

        trailing = self._char(cursor + 1)
        if trailing in _TRAILING_STOP:
            return None

        return TokenMatch(
            payload=self._source[pos + 1 : cursor],
            start=pos,
            end=cursor + 1,
            trailing=trailing,
        )


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def match_token(source: str, pos: int = 0) -> TokenMatch | None:
    """Match a magic-link token at ``pos`` in ``source``.

    Example
    -------
    ::

        from magic_link.lexer import match_token
        match_token("Foo {@antfu} Bar", 4).payload  # '@antfu'
    """
    return TokenMatcher(source).match(pos)
