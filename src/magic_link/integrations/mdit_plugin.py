"""markdown-it-py plugin.

Registers an inline rule named ``magic_link`` before the built-in
``text`` rule, so ``{...}`` tokens are intercepted before they are
emitted as plain text.

Example
-------
::

    from markdown_it import MarkdownIt
    from magic_link.integrations import magic_link_plugin

    md = MarkdownIt().use(magic_link_plugin, {"linksMap": {"VueUse": "https://vueuse.org"}})
    md.render("Built with {VueUse} by {@antfu}")
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_inline import StateInline

from magic_link.config.options import MagicLinkOptions
from magic_link.core.engine import MagicLinkEngine
from magic_link.core.records import IMAGE_CLASS, ResolvedLink

RULE_NAME: Final[str] = "magic_link"


def image_span_html(resolved: ResolvedLink) -> str:
    """Return the decorative image span emitted inside the anchor."""
    return (
        f'<span class="{IMAGE_CLASS}" '
        f"style=\"background-image: url('{escapeHtml(resolved.image_url)}');\"></span>"
    )


def _push_link(state: StateInline, resolved: ResolvedLink) -> None:
    token = state.push("link_open", "a", 1)
    token.attrs = {"href": resolved.link, "class": resolved.class_name}
    token.info = "auto"

    token = state.push("html_inline", "", 0)
    token.content = image_span_html(resolved)

    token = state.push("text", "", 0)
    token.content = resolved.text

    token = state.push("link_close", "a", -1)
    token.info = "auto"


def magic_link_plugin(
    md: MarkdownIt,
    options: MagicLinkOptions | Mapping[str, Any] | None = None,
) -> None:
    """Install the magic-link inline rule on ``md``.

    Parameters
    ----------
    md:
        The markdown-it-py parser instance.
    options:
        ``MagicLinkOptions`` or a mapping accepted by
        ``MagicLinkOptions.from_dict``.

    Raises
    ------
    magic_link.config.ConfigError
        If ``options`` is a mapping with an invalid shape.
    """
    if not isinstance(options, MagicLinkOptions):
        options = MagicLinkOptions.from_dict(options)
    # Late-bound so a normalizer replaced on ``md`` after setup is honoured.
    engine = MagicLinkEngine(options, normalize_link=lambda url: md.normalizeLink(url))

    def magic_link(state: StateInline, silent: bool) -> bool:
        token = engine.match(state.src, state.pos)
        if token is None:
            return False

        if silent:
            if engine.parse(token.payload) is None:
                return False
        else:
            resolved = engine.resolve(token.payload)
            if resolved is None:
                return False
            _push_link(state, resolved)

        state.pos += token.length
        return True

    md.inline.ruler.before("text", RULE_NAME, magic_link)
