"""Field resolver: turns a handler's ``PartialLink`` into a ``ResolvedLink``.

The link is normalized by the host first and that value is used for
every later default.  After defaults are filled in, each handler's
postprocess hook runs in chain order over the accumulated record.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable

from magic_link.core.records import (
    CLASS_PREFIX,
    DEFAULT_TYPE,
    PartialLink,
    ResolvedLink,
    favicon_url,
    strip_scheme,
)
from magic_link.handlers.base import MagicLinkHandler

LinkNormalizer = Callable[[str], str]


def materialize(
    partial: PartialLink,
    handlers: Iterable[MagicLinkHandler],
    normalize_link: LinkNormalizer,
) -> ResolvedLink:
    """Fill every omitted field of ``partial`` and run postprocess hooks.

    Parameters
    ----------
    partial:
        The winning handler's result.
    handlers:
        The full handler chain; every handler's ``postprocess`` runs,
        not only the winner's.
    normalize_link:
        Host link normalizer.  Must be idempotent.

    Returns
    -------
    ResolvedLink
        A record with all fields populated.
    """
    link = normalize_link(partial.link)
    link_type = partial.type or DEFAULT_TYPE

    resolved = ResolvedLink(
        text=partial.text or strip_scheme(link),
        link=link,
        type=link_type,
        classes=(CLASS_PREFIX, f"{CLASS_PREFIX}-{link_type}", *partial.classes),
        image_url=partial.image_url or favicon_url(link),
    )

    for handler in handlers:
        resolved = handler.postprocess(resolved) or resolved
    return resolved
