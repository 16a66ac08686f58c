"""markdown-magic-link — ``{...}`` magic links for Markdown.

Turns inline tokens such as ``{@antfu}``, ``{VueUse|https://vueuse.org}``
or ``{@bilibili:user}`` into links decorated with an avatar or favicon.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import magic_link

    # Render Markdown with the default handler chain
    html = magic_link.render("Made by {@antfu}")

    # Configure links and image overrides
    options = magic_link.MagicLinkOptions(links_map={"VueUse": "https://vueuse.org"})
    html = magic_link.render("Built with {VueUse}", options)

    # Resolve a single payload without rendering
    record = magic_link.resolve("@antfu")
    record.image_url
    'https://github.com/antfu.png'

    # Install on your own markdown-it-py parser
    md = magic_link.create_markdown(options)

    magic_link.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from magic_link.config import ConfigError, MagicLinkOptions, load_options
from magic_link.core.records import PartialLink, ResolvedLink
from magic_link.handlers import MagicLinkHandler

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from markdown_it import MarkdownIt


def create_markdown(
    options: MagicLinkOptions | Mapping[str, Any] | None = None,
    preset: str = "commonmark",
) -> "MarkdownIt":
    """Return a markdown-it-py parser with the magic-link plugin installed.

    Parameters
    ----------
    options:
        ``MagicLinkOptions`` or a mapping accepted by ``from_dict``.
    preset:
        markdown-it-py preset name passed to ``MarkdownIt``.
    """
    from markdown_it import MarkdownIt

    from magic_link.integrations.mdit_plugin import magic_link_plugin

    return MarkdownIt(preset).use(magic_link_plugin, options)


def render(
    text: str, options: MagicLinkOptions | Mapping[str, Any] | None = None
) -> str:
    """Render Markdown ``text`` to HTML with magic links enabled.

    Raises
    ------
    magic_link.ConfigError
        If ``options`` is a mapping with an invalid shape.
    """
    return create_markdown(options).render(text)


def resolve(
    payload: str, options: MagicLinkOptions | Mapping[str, Any] | None = None
) -> ResolvedLink | None:
    """Resolve a single token payload (the text between the braces).

    Returns
    -------
    ResolvedLink | None
        The fully resolved record, or ``None`` if no handler accepts
        the payload.
    """
    from magic_link.core.engine import MagicLinkEngine

    if not isinstance(options, MagicLinkOptions):
        options = MagicLinkOptions.from_dict(options)
    return MagicLinkEngine(options).resolve(payload)


__all__ = [
    "__version__",
    "ConfigError",
    "MagicLinkHandler",
    "MagicLinkOptions",
    "PartialLink",
    "ResolvedLink",
    "create_markdown",
    "load_options",
    "render",
    "resolve",
]
