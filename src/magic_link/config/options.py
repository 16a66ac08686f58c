"""Magic-link configuration.

``MagicLinkOptions`` is built once at setup and stays read-only for the
lifetime of the parser it configures.  It can be constructed directly,
from a plain mapping with ``from_dict`` (camelCase keys accepted), or
from a YAML/JSON file with ``load_options``.

Example
-------
::

    import re
    from magic_link.config import MagicLinkOptions

    options = MagicLinkOptions(
        links_map={"VueUse": "https://vueuse.org"},
        platform_users={
            "bilibili": {
                "lu-jiejie": {
                    "link": "https://space.bilibili.com/123456",
                    "avatarUrl": "https://i0.hdslb.com/bfs/face/avatar.jpg",
                },
            },
        },
        image_overrides=[(re.compile(r"^https://vueuse\\.org/"), "https://example.com/v.png")],
    )
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

import yaml

from magic_link.config.errors import ConfigError
from magic_link.handlers.base import MagicLinkHandler
from magic_link.resolver.overrides import ImageOverride

# Accepted spellings for each option key, mapped to the field name.
_TOP_LEVEL_KEYS: Final[dict[str, str]] = {
    "links_map": "links_map",
    "linksMap": "links_map",
    "platform_users": "platform_users",
    "platformUsers": "platform_users",
    "image_overrides": "image_overrides",
    "imageOverrides": "image_overrides",
    "handlers": "handlers",
}


@dataclass(frozen=True, slots=True)
class LinkTarget:
    """A literal-link map entry."""

    link: str
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class PlatformUser:
    """A known user on a non-default platform.

    Parameters
    ----------
    link:
        Profile URL.
    avatar_url:
        Avatar image URL.
    display_name:
        Optional display text used when the payload gives none.
    """

    link: str
    avatar_url: str
    display_name: str | None = None


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in ``data``, else None."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _require_str(value: Any, path: str, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{what} must be a non-empty string", path)
    return value


def _optional_str(value: Any, path: str, what: str) -> str | None:
    if value is None:
        return None
    return _require_str(value, path, what)


def _coerce_link_target(value: Any, path: str) -> LinkTarget:
    if isinstance(value, LinkTarget):
        return value
    if isinstance(value, str):
        return LinkTarget(link=_require_str(value, path, "link"))
    if isinstance(value, Mapping):
        if "link" not in value:
            raise ConfigError("missing 'link'", path)
        return LinkTarget(
            link=_require_str(value["link"], path, "link"),
            image_url=_optional_str(
                _pick(value, "image_url", "imageUrl", "image"), path, "image_url"
            ),
        )
    raise ConfigError(
        f"expected a URL string or a mapping with 'link', got {type(value).__name__}",
        path,
    )


def _coerce_platform_user(value: Any, path: str) -> PlatformUser:
    if isinstance(value, PlatformUser):
        return value
    if not isinstance(value, Mapping):
        raise ConfigError(f"expected a mapping, got {type(value).__name__}", path)
    if "link" not in value:
        raise ConfigError("missing 'link'", path)
    avatar = _pick(value, "avatar_url", "avatarUrl")
    if avatar is None:
        raise ConfigError("missing 'avatar_url'", path)
    return PlatformUser(
        link=_require_str(value["link"], path, "link"),
        avatar_url=_require_str(avatar, path, "avatar_url"),
        display_name=_optional_str(
            _pick(value, "display_name", "displayName"), path, "display_name"
        ),
    )


def _compile(pattern: Any, path: str) -> re.Pattern[str]:
    source = _require_str(pattern, path, "pattern")
    try:
        return re.compile(source)
    except re.error as exc:
        raise ConfigError(f"invalid pattern {source!r}: {exc}", path) from exc


def _coerce_override(value: Any, path: str) -> ImageOverride:
    if isinstance(value, ImageOverride):
        return value
    if isinstance(value, Mapping):
        image = _require_str(
            _pick(value, "image", "image_url", "imageUrl"), path, "image"
        )
        if "pattern" in value:
            return ImageOverride(_compile(value["pattern"], path), image)
        if "match" in value:
            return ImageOverride(_require_str(value["match"], path, "match"), image)
        raise ConfigError("override needs either 'match' or 'pattern'", path)
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        matcher, image = value
        if not isinstance(matcher, re.Pattern):
            matcher = _require_str(matcher, path, "matcher")
        return ImageOverride(matcher, _require_str(image, path, "image"))
    raise ConfigError(
        "expected a (matcher, image) pair or a mapping with 'match'/'pattern' and 'image'",
        path,
    )


def _as_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"expected a mapping, got {type(value).__name__}", path)
    return value


def _as_sequence(value: Any, path: str) -> Sequence[Any]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ConfigError(f"expected a list, got {type(value).__name__}", path)
    return value


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MagicLinkOptions:
    """Read-only configuration for a magic-link parser.

    Parameters
    ----------
    links_map:
        Case-sensitive map of link names to a URL string or ``LinkTarget``.
    platform_users:
        ``platform -> username -> PlatformUser`` (mappings are accepted
        and converted).
    image_overrides:
        Ordered ``ImageOverride`` rules or ``(matcher, image)`` pairs.
    handlers:
        Optional full replacement of the handler chain.  Entries are
        handler instances or names registered in the handler registry.
    """

    links_map: Mapping[str, LinkTarget] = field(default_factory=dict)
    platform_users: Mapping[str, Mapping[str, PlatformUser]] = field(default_factory=dict)
    image_overrides: tuple[ImageOverride, ...] = ()
    handlers: tuple[MagicLinkHandler | str, ...] | None = None

    def __post_init__(self) -> None:
        links = _as_mapping(self.links_map, "links_map")
        object.__setattr__(
            self,
            "links_map",
            MappingProxyType(
                {
                    str(name): _coerce_link_target(target, f"links_map.{name}")
                    for name, target in links.items()
                }
            ),
        )

        platforms: dict[str, Mapping[str, PlatformUser]] = {}
        for platform, users in _as_mapping(self.platform_users, "platform_users").items():
            base = f"platform_users.{platform}"
            platforms[str(platform)] = MappingProxyType(
                {
                    str(username): _coerce_platform_user(user, f"{base}.{username}")
                    for username, user in _as_mapping(users, base).items()
                }
            )
        object.__setattr__(self, "platform_users", MappingProxyType(platforms))

        object.__setattr__(
            self,
            "image_overrides",
            tuple(
                _coerce_override(rule, f"image_overrides.{index}")
                for index, rule in enumerate(
                    _as_sequence(self.image_overrides, "image_overrides")
                )
            ),
        )

        if self.handlers is not None:
            handlers = tuple(_as_sequence(self.handlers, "handlers"))
            for index, entry in enumerate(handlers):
                if not isinstance(entry, (MagicLinkHandler, str)):
                    raise ConfigError(
                        f"expected a handler name or MagicLinkHandler, got {type(entry).__name__}",
                        f"handlers.{index}",
                    )
            object.__setattr__(self, "handlers", handlers)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "MagicLinkOptions":
        """Build options from a plain mapping.

        Both snake_case and camelCase keys are accepted
        (``linksMap``, ``platformUsers``, ``imageOverrides``).

        Raises
        ------
        ConfigError
            On unknown keys or malformed entries.
        """
        kwargs: dict[str, Any] = {}
        for key, value in _as_mapping(data, "").items():
            name = _TOP_LEVEL_KEYS.get(key)
            if name is None:
                raise ConfigError(f"unknown option {key!r}")
            if name in kwargs:
                raise ConfigError(f"option {name!r} given twice")
            kwargs[name] = value
        return cls(**kwargs)


def load_options(path: str | Path) -> MagicLinkOptions:
    """Read options from a YAML (or JSON) file.

    Parameters
    ----------
    path:
        Path to the configuration file.  An empty file yields default
        options.

    Raises
    ------
    ConfigError
        If the file is not valid YAML or has an invalid shape.
    OSError
        If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc
    return MagicLinkOptions.from_dict(data)
