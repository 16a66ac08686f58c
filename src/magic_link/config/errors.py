"""Configuration error types.

Errors carry the dotted key path of the offending entry so the CLI can
point at the exact place in a YAML file.
"""
from __future__ import annotations


class ConfigError(ValueError):
    """Raised when magic-link options have an invalid shape.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    path:
        Dotted key path of the offending entry, e.g.
        ``"platform_users.bilibili.lu"``.  Empty for top-level problems.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.config_message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
