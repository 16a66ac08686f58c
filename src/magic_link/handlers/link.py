"""Generic link handler: ``{text|url}``, ``{url}`` and ``{Name}``.

``Name`` is looked up in the literal-link map, whose entries supply a
default URL and optionally an image.  An explicit URL in the payload
always wins over the map.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar, Final
from urllib.parse import urlsplit

from magic_link.core.records import PartialLink, strip_scheme
from magic_link.handlers.base import MagicLinkHandler, split_payload

if TYPE_CHECKING:
    from magic_link.config.options import LinkTarget, MagicLinkOptions

LINK_TYPE: Final[str] = "link"

_HTTP_PREFIXES: Final[tuple[str, ...]] = ("http://", "https://")


def _has_host(url: str) -> bool:
    try:
        return bool(urlsplit(url).hostname)
    except ValueError:
        return False


class LinkHandler(MagicLinkHandler):
    """Resolve payloads that are, or map to, an HTTP(S) URL.

    Parameters
    ----------
    links_map:
        Case-sensitive map of names to a URL string or ``LinkTarget``.
    """

    name: ClassVar[str] = "link"

    def __init__(self, links_map: Mapping[str, str | LinkTarget] | None = None) -> None:
        self._links_map: Mapping[str, str | LinkTarget] = links_map or {}

    @classmethod
    def from_options(cls, options: "MagicLinkOptions") -> "LinkHandler":
        return cls(options.links_map)

    def _defaults(self, key: str) -> tuple[str | None, str | None]:
        """Return ``(link, image_url)`` configured for ``key``."""
        target = self._links_map.get(key) if key else None
        if target is None:
            return None, None
        if isinstance(target, str):
            return target, None
        return target.link, target.image_url

    def resolve(self, payload: str) -> PartialLink | None:
        parts = split_payload(payload)
        text = parts[0]
        default_link, default_image = self._defaults(text)

        url = (parts[1] if len(parts) > 1 else "") or default_link or text
        # Anything that is not an HTTP(S) URL (mentions, plain words) is left
        # for later handlers or stays literal.
        if not url.startswith(_HTTP_PREFIXES):
            return None
        if not _has_host(url):
            return None

        return PartialLink(
            text=text or strip_scheme(url),
            link=url,
            type=LINK_TYPE,
            image_url=default_image,
        )
