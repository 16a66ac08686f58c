"""Platform-scoped mention handler: ``{@platform:user|text|link}``.

Only users listed in the platform-user table resolve.  Unknown platforms
and unknown users decline, so the token is rendered as literal text.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar

from magic_link.core.records import PartialLink
from magic_link.handlers.base import MagicLinkHandler, split_payload

if TYPE_CHECKING:
    from magic_link.config.options import MagicLinkOptions, PlatformUser


class PlatformAtHandler(MagicLinkHandler):
    """Resolve ``@platform:user`` mentions against configured users.

    Parameters
    ----------
    platform_users:
        ``platform -> username -> PlatformUser`` table.
    """

    name: ClassVar[str] = "platform-at"

    def __init__(
        self,
        platform_users: Mapping[str, Mapping[str, PlatformUser]] | None = None,
    ) -> None:
        self._platform_users: Mapping[str, Mapping[str, PlatformUser]] = platform_users or {}

    @classmethod
    def from_options(cls, options: "MagicLinkOptions") -> "PlatformAtHandler":
        return cls(options.platform_users)

    def resolve(self, payload: str) -> PartialLink | None:
        parts = split_payload(payload)
        mention = parts[0]
        custom_text = parts[1] if len(parts) > 1 else ""
        custom_link = parts[2] if len(parts) > 2 else ""

        if not mention.startswith("@"):
            return None

        platform, sep, username = mention[1:].partition(":")
        if not sep or not platform or not username:
            return None

        user = self._platform_users.get(platform, {}).get(username)
        if user is None:
            return None

        return PartialLink(
            text=custom_text or user.display_name or username.upper(),
            link=custom_link or user.link,
            type=f"{platform}-at",
            image_url=user.avatar_url,
        )
