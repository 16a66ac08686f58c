"""Payload handlers and the handler chain.

Built-in handlers, in their default chain order:

link
    ``{url}``, ``{text|url}``, ``{Name}`` via the literal-link map.
platform-at
    ``{@platform:user}`` against the platform-user table.
github-at
    ``{@login}`` for GitHub profiles.
"""
from __future__ import annotations

from magic_link.handlers.base import MagicLinkHandler, parse_magic_link, split_payload
from magic_link.handlers.github import GITHUB_RESERVED_ROUTES, GitHubAtHandler
from magic_link.handlers.link import LinkHandler
from magic_link.handlers.platform import PlatformAtHandler

__all__ = [
    "GITHUB_RESERVED_ROUTES",
    "GitHubAtHandler",
    "LinkHandler",
    "MagicLinkHandler",
    "PlatformAtHandler",
    "parse_magic_link",
    "split_payload",
]
