"""Host Markdown parser integrations.

mdit_plugin
    ``magic_link_plugin`` for markdown-it-py.
pymd_extension
    ``MagicLinkExtension`` for Python-Markdown.
"""
from __future__ import annotations

from magic_link.integrations.mdit_plugin import magic_link_plugin
from magic_link.integrations.pymd_extension import MagicLinkExtension, makeExtension

__all__ = ["MagicLinkExtension", "magic_link_plugin", "makeExtension"]
