"""Link records produced while resolving a magic-link token.

Handlers return a ``PartialLink`` in which only ``link`` is required.
The field resolver turns it into a ``ResolvedLink`` whose fields are all
populated.  Both are frozen dataclasses; postprocess hooks and overrides
produce modified copies with ``dataclasses.replace``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final
from urllib.parse import urlsplit

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CLASS_PREFIX: Final[str] = "markdown-magic-link"
IMAGE_CLASS: Final[str] = f"{CLASS_PREFIX}-image"
DEFAULT_TYPE: Final[str] = "link"

FAVICON_PREFIX: Final[str] = "https://favicon.yandex.net/favicon/"

_HTTP_SCHEME: Final[re.Pattern[str]] = re.compile(r"^https?://", re.IGNORECASE)


def strip_scheme(url: str) -> str:
    """Return ``url`` without a leading ``http://`` or ``https://``."""
    return _HTTP_SCHEME.sub("", url, count=1)


def favicon_url(url: str) -> str:
    """Return the favicon lookup URL for the host of ``url``."""
    try:
        host = urlsplit(url).hostname or ""
    except ValueError:
        host = ""
    return f"{FAVICON_PREFIX}{host}"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PartialLink:
    """A handler's interpretation of a payload.

    Parameters
    ----------
    link:
        Target URL.  Always present on a successful resolution.
    text:
        Display text, or ``None`` to derive it from the link.
    type:
        Category tag such as ``"link"`` or ``"github-at"``.
    classes:
        Extra CSS classes appended after the generic ones.
    image_url:
        Avatar or icon URL, or ``None`` for the favicon default.
    """

    link: str
    text: str | None = None
    type: str | None = None
    classes: tuple[str, ...] = field(default_factory=tuple)
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedLink:
    """A fully defaulted link record, ready for the host to render."""

    text: str
    link: str
    type: str
    classes: tuple[str, ...]
    image_url: str

    @property
    def class_name(self) -> str:
        """Return the space-joined class list for the ``class`` attribute."""
        return " ".join(self.classes)
