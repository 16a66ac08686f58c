"""Plugin subsystem for markdown-magic-link.

The registry module maps handler names to handler classes.  Third-party
handlers register via ``importlib.metadata`` entry-points under the
"magic_link.handlers" group.

Example
-------
Declare a handler in pyproject.toml:

.. code-block:: toml

    [project.entry-points."magic_link.handlers"]
    npm = "my_package.handlers:NpmHandler"
"""
from __future__ import annotations

from magic_link.plugins.registry import (
    HandlerRegistry,
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    handler_registry,
)

__all__ = [
    "HandlerRegistry",
    "PluginAlreadyRegisteredError",
    "PluginNotFoundError",
    "handler_registry",
]
