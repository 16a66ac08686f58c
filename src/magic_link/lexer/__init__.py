"""Magic-link lexer module.

Exports the ``TokenMatcher`` class and the ``match_token`` convenience function.
"""
from __future__ import annotations

from magic_link.lexer.matcher import TokenMatch, TokenMatcher, match_token

__all__ = ["TokenMatch", "TokenMatcher", "match_token"]
