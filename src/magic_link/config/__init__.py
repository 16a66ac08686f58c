"""Configuration surface: options, file loading, and errors."""
from __future__ import annotations

from magic_link.config.errors import ConfigError
from magic_link.config.options import (
    LinkTarget,
    MagicLinkOptions,
    PlatformUser,
    load_options,
)

__all__ = [
    "ConfigError",
    "LinkTarget",
    "MagicLinkOptions",
    "PlatformUser",
    "load_options",
]
