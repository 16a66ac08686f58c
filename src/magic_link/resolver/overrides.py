"""Image override layer.

Runs last in the pipeline.  Rules are checked in order against the
resolved link; the first matching rule replaces ``image_url`` and the
scan stops, so a narrow rule listed before a broad one takes precedence.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace

from magic_link.core.records import ResolvedLink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImageOverride:
    """A ``(matcher, image_url)`` rule.

    Parameters
    ----------
    matcher:
        A plain string compared for equality with the resolved link, or a
        compiled pattern searched within it.
    image_url:
        Replacement image URL.
    """

    matcher: str | re.Pattern[str]
    image_url: str

    def matches(self, link: str) -> bool:
        """Return True if this rule applies to ``link``."""
        if isinstance(self.matcher, str):
            return link == self.matcher
        return self.matcher.search(link) is not None


def apply_image_overrides(
    resolved: ResolvedLink, rules: Iterable[ImageOverride]
) -> ResolvedLink:
    """Apply the first matching override rule to ``resolved``.

    Parameters
    ----------
    resolved:
        The record after field resolution and postprocessing.
    rules:
        Override rules in priority order.

    Returns
    -------
    ResolvedLink
        A copy with the overridden image, or ``resolved`` itself when no
        rule matches.
    """
    for rule in rules:
        if rule.matches(resolved.link):
            logger.debug("Image override for %r -> %r", resolved.link, rule.image_url)
            return replace(resolved, image_url=rule.image_url)
    return resolved
