"""Python-Markdown extension.

Registers an inline processor named ``magic_link`` that produces the
same markup as the markdown-it-py plugin.

Example
-------
::

    import markdown
    from magic_link.integrations import MagicLinkExtension

    markdown.markdown(
        "Built with {VueUse}",
        extensions=[MagicLinkExtension(links_map={"VueUse": "https://vueuse.org"})],
    )
"""
from __future__ import annotations

import xml.etree.ElementTree as etree
from typing import Any, Final

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.util import AtomicString

from magic_link.config.errors import ConfigError
from magic_link.config.options import MagicLinkOptions
from magic_link.core.engine import MagicLinkEngine
from magic_link.core.records import IMAGE_CLASS, ResolvedLink

PROCESSOR_NAME: Final[str] = "magic_link"
# After backslash escapes (180), before inline links (160).
PROCESSOR_PRIORITY: Final[int] = 175

_OPEN_BRACE_RE: Final[str] = r"\{"
_SETTING_KEYS: Final[tuple[str, ...]] = ("links_map", "platform_users", "image_overrides")


def build_anchor(resolved: ResolvedLink) -> etree.Element:
    """Build the ``<a>`` element for a resolved link."""
    anchor = etree.Element("a")
    anchor.set("href", resolved.link)
    anchor.set("class", resolved.class_name)
    image = etree.SubElement(anchor, "span")
    image.set("class", IMAGE_CLASS)
    image.set("style", f"background-image: url('{resolved.image_url}');")
    image.tail = AtomicString(resolved.text)
    return anchor


class MagicLinkInlineProcessor(InlineProcessor):
    """Find ``{`` and hand the rest of the token to the engine's matcher."""

    def __init__(self, engine: MagicLinkEngine, md: Markdown | None = None) -> None:
        super().__init__(_OPEN_BRACE_RE, md)
        self.engine = engine

    def handleMatch(  # type: ignore[override]
        self, m: Any, data: str
    ) -> tuple[etree.Element | None, int | None, int | None]:
        found = self.engine.resolve_at(data, m.start(0))
        if found is None:
            return None, None, None
        token, resolved = found
        return build_anchor(resolved), token.start, token.end


class MagicLinkExtension(Extension):
    """Python-Markdown extension for magic links.

    Accepts either ``options`` (a ``MagicLinkOptions`` or a mapping) or
    the individual ``links_map``, ``platform_users`` and
    ``image_overrides`` settings.
    """

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "options": [{}, "MagicLinkOptions instance or mapping of options"],
            "links_map": [{}, "Map of link names to URLs"],
            "platform_users": [{}, "platform -> username -> user details"],
            "image_overrides": [[], "Ordered (matcher, image) override rules"],
        }
        super().__init__(**kwargs)

    def build_options(self) -> MagicLinkOptions:
        """Merge the ``options`` setting with the individual settings.

        Raises
        ------
        ConfigError
            If a ``MagicLinkOptions`` instance is combined with individual
            settings, or a setting is given twice.
        """
        options = self.getConfig("options")
        settings = {key: self.getConfig(key) for key in _SETTING_KEYS if self.getConfig(key)}
        if isinstance(options, MagicLinkOptions):
            if settings:
                raise ConfigError(
                    "cannot be combined with a MagicLinkOptions instance",
                    ", ".join(settings),
                )
            return options
        data = dict(options or {})
        for key, value in settings.items():
            if key in data:
                raise ConfigError("given both in 'options' and as a setting", key)
            data[key] = value
        return MagicLinkOptions.from_dict(data)

    def extendMarkdown(self, md: Markdown) -> None:
        engine = MagicLinkEngine(self.build_options())
        md.inlinePatterns.register(
            MagicLinkInlineProcessor(engine, md), PROCESSOR_NAME, PROCESSOR_PRIORITY
        )


def makeExtension(**kwargs: Any) -> MagicLinkExtension:  # noqa: N802
    return MagicLinkExtension(**kwargs)
