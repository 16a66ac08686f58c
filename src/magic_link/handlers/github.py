"""GitHub mention handler: ``{@login|text|link}``.

GitHub is the default platform, so a bare ``@login`` always resolves
without any lookup table.  The postprocess hook also gives plain links
to a GitHub profile (``{https://github.com/antfu}``) the user's avatar
instead of the generic favicon.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace
from typing import ClassVar, Final

from magic_link.core.records import FAVICON_PREFIX, PartialLink, ResolvedLink
from magic_link.handlers.base import MagicLinkHandler, split_payload

GITHUB_AT_TYPE: Final[str] = "github-at"
GITHUB_URL: Final[str] = "https://github.com"

# First path segments of github.com that are site routes, not logins.
GITHUB_RESERVED_ROUTES: Final[frozenset[str]] = frozenset(
    {
        "settings",
        "pulls",
        "issues",
        "discussions",
        "sponsor",
        "sponsors",
        "notifications",
    }
)

_GITHUB_SCOPE: Final[re.Pattern[str]] = re.compile(
    r"^(?:https?://)?github\.com/([\w-]*)(?:$|/)", re.ASCII
)


def github_profile_url(login: str) -> str:
    return f"{GITHUB_URL}/{login}"


def github_avatar_url(login: str) -> str:
    return f"{GITHUB_URL}/{login}.png"


class GitHubAtHandler(MagicLinkHandler):
    """Resolve ``@login`` mentions to GitHub profiles.

    Parameters
    ----------
    reserved_routes:
        Path segments under ``github.com/`` that are never treated as a
        login by the avatar repair hook.
    """

    name: ClassVar[str] = "github-at"

    def __init__(self, reserved_routes: Iterable[str] = GITHUB_RESERVED_ROUTES) -> None:
        self._reserved_routes: frozenset[str] = frozenset(reserved_routes)

    def resolve(self, payload: str) -> PartialLink | None:
        parts = split_payload(payload)
        mention = parts[0]
        custom_text = parts[1] if len(parts) > 1 else ""
        custom_link = parts[2] if len(parts) > 2 else ""

        if not mention.startswith("@"):
            return None

        login = mention[1:]
        # platform:user belongs to the platform-scoped handler
        if ":" in login:
            return None

        return PartialLink(
            text=custom_text or login.upper(),
            link=custom_link or github_profile_url(login),
            type=GITHUB_AT_TYPE,
            image_url=github_avatar_url(login),
        )

    def postprocess(self, resolved: ResolvedLink) -> ResolvedLink | None:
        if resolved.type == GITHUB_AT_TYPE:
            return None
        match = _GITHUB_SCOPE.match(resolved.link)
        if match is None:
            return None
        login = match.group(1)
        if not login or login in self._reserved_routes:
            return None
        if not resolved.image_url.startswith(FAVICON_PREFIX):
            return None
        return replace(resolved, image_url=github_avatar_url(login))
