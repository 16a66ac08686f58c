"""Handler interface and the handler chain.

A handler turns a raw payload into a ``PartialLink`` or declines by
returning ``None``.  Declining is a normal outcome, never an exception;
an exception raised from ``resolve`` is a bug in the handler and is left
to propagate.

Handlers may also define ``postprocess``, which sees every resolved
record (whichever handler won) and may return a corrected copy.

Usage
-----
::

    from magic_link.handlers import GitHubAtHandler, LinkHandler, parse_magic_link

    handlers = [LinkHandler(), GitHubAtHandler()]
    parse_magic_link("@antfu", handlers)
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, ClassVar

from magic_link.core.records import PartialLink, ResolvedLink

if TYPE_CHECKING:
    from magic_link.config.options import MagicLinkOptions

logger = logging.getLogger(__name__)


def split_payload(payload: str) -> list[str]:
    """Split a payload on ``|`` and strip whitespace around each part."""
    return [part.strip() for part in payload.split("|")]


class MagicLinkHandler(ABC):
    """Base class for payload handlers.

    Subclasses set ``name`` and implement ``resolve``.  Handlers are
    stateless apart from the configuration given to their constructor.
    """

    name: ClassVar[str] = ""

    @classmethod
    def from_options(cls, options: "MagicLinkOptions") -> "MagicLinkHandler":
        """Build the handler from parser options.

        The default ignores ``options``; handlers that read configuration
        override this.
        """
        return cls()

    @abstractmethod
    def resolve(self, payload: str) -> PartialLink | None:
        """Interpret ``payload``, or return ``None`` to decline."""

    def postprocess(self, resolved: ResolvedLink) -> ResolvedLink | None:
        """Return a corrected copy of ``resolved``, or ``None`` to leave it."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def parse_magic_link(
    payload: str, handlers: Iterable[MagicLinkHandler]
) -> PartialLink | None:
    """Run ``payload`` through ``handlers`` in order.

    Parameters
    ----------
    payload:
        Text between the braces of a token.
    handlers:
        The handler chain in priority order.

    Returns
    -------
    PartialLink | None
        The first non-declining result, or ``None`` if every handler
        declined.
    """
    for handler in handlers:
        parsed = handler.resolve(payload)
        if parsed is not None:
            logger.debug("Payload %r resolved by handler %r", payload, handler.name)
            return parsed
    logger.debug("Payload %r left unresolved", payload)
    return None
