"""Magic-link engine: the full resolve pipeline bound to one configuration.

Host integrations share one ``MagicLinkEngine`` per parser instance.
The engine is read-only after construction, so a single instance can
serve concurrent renders.

Usage
-----
::

    from magic_link.config import MagicLinkOptions
    from magic_link.core.engine import MagicLinkEngine

    engine = MagicLinkEngine(MagicLinkOptions(links_map={"VueUse": "https://vueuse.org"}))
    engine.resolve("VueUse").link   # 'https://vueuse.org'
    engine.resolve("plain words")   # None
"""
from __future__ import annotations

from markdown_it.common.normalize_url import normalizeLink

from magic_link.config.options import MagicLinkOptions
from magic_link.core.records import PartialLink, ResolvedLink
from magic_link.handlers.base import MagicLinkHandler, parse_magic_link
from magic_link.lexer.matcher import TokenMatch, match_token
from magic_link.plugins.registry import handler_registry
from magic_link.resolver.fields import LinkNormalizer, materialize
from magic_link.resolver.overrides import apply_image_overrides


class MagicLinkEngine:
    """Token matcher, handler chain, field resolver and override layer.

    Parameters
    ----------
    options:
        Parser configuration.  Defaults to empty options with the
        default handler chain.
    normalize_link:
        Host link normalizer.  Defaults to markdown-it-py's
        ``normalizeLink``.
    """

    __slots__ = ("_options", "_handlers", "_normalize_link")

    def __init__(
        self,
        options: MagicLinkOptions | None = None,
        normalize_link: LinkNormalizer | None = None,
    ) -> None:
        self._options: MagicLinkOptions = options if options is not None else MagicLinkOptions()
        self._handlers: tuple[MagicLinkHandler, ...] = handler_registry.build_chain(
            self._options.handlers, self._options
        )
        self._normalize_link: LinkNormalizer = normalize_link or normalizeLink

    @property
    def options(self) -> MagicLinkOptions:
        return self._options

    @property
    def handlers(self) -> tuple[MagicLinkHandler, ...]:
        """The handler chain in priority order."""
        return self._handlers

    def match(self, source: str, pos: int) -> TokenMatch | None:
        """Return the token starting at ``pos`` in ``source``, if any."""
        return match_token(source, pos)

    def parse(self, payload: str) -> PartialLink | None:
        """Run the handler chain only, without defaults or overrides."""
        return parse_magic_link(payload, self._handlers)

    def resolve(self, payload: str) -> ResolvedLink | None:
        """Fully resolve ``payload``, or return ``None`` if no handler accepts it."""
        parsed = self.parse(payload)
        if parsed is None:
            return None
        resolved = materialize(parsed, self._handlers, self._normalize_link)
        return apply_image_overrides(resolved, self._options.image_overrides)

    def resolve_at(
        self, source: str, pos: int
    ) -> tuple[TokenMatch, ResolvedLink] | None:
        """Match a token at ``pos`` and resolve it in one step."""
        token = self.match(source, pos)
        if token is None:
            return None
        resolved = self.resolve(token.payload)
        if resolved is None:
            return None
        return token, resolved

    def __repr__(self) -> str:
        names = [handler.name for handler in self._handlers]
        return f"MagicLinkEngine(handlers={names})"
