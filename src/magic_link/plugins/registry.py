"""Handler registry for markdown-magic-link.

Maps handler names to ``MagicLinkHandler`` subclasses so that a handler
chain can be described by name, for instance in a YAML configuration
file.  The built-in handlers are registered at import time; third-party
packages contribute more by declaring entry-points in their own
``pyproject.toml`` under the "magic_link.handlers" group.

Example
-------
Register a handler with the decorator::

    from magic_link.handlers import MagicLinkHandler
    from magic_link.plugins.registry import handler_registry

    @handler_registry.register("npm")
    class NpmHandler(MagicLinkHandler):
        name = "npm"

        def resolve(self, payload):
            ...

Declare it for discovery in a downstream ``pyproject.toml``::

    [project.entry-points."magic_link.handlers"]
    npm = "my_package.handlers:NpmHandler"

Build a chain from names::

    handler_registry.load_entrypoints()
    chain = handler_registry.build_chain(["link", "npm", "github-at"], options)
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Final

from magic_link.handlers.base import MagicLinkHandler
from magic_link.handlers.github import GitHubAtHandler
from magic_link.handlers.link import LinkHandler
from magic_link.handlers.platform import PlatformAtHandler

if TYPE_CHECKING:
    from magic_link.config.options import MagicLinkOptions

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP: Final[str] = "magic_link.handlers"

DEFAULT_HANDLER_NAMES: Final[tuple[str, ...]] = ("link", "platform-at", "github-at")

HandlerClass = type[MagicLinkHandler]


class PluginNotFoundError(KeyError):
    """Raised when a requested handler name is not in the registry."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.plugin_name = name
        self.available = sorted(available)
        super().__init__(
            f"Handler {name!r} is not registered. "
            f"Available handlers: {', '.join(self.available) or '(none)'}. "
            "Check that the package is installed and its entry-points are declared."
        )


class PluginAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a name that already exists."""

    def __init__(self, name: str) -> None:
        self.plugin_name = name
        super().__init__(
            f"Handler {name!r} is already registered. "
            "Use a unique name or explicitly deregister the existing entry first."
        )


class HandlerRegistry:
    """Name-to-class registry of magic-link handlers.

    Handlers are registered either via the ``@register`` decorator at
    import time, or lazily via ``load_entrypoints`` for installed packages.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, HandlerClass] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str) -> Callable[[HandlerClass], HandlerClass]:
        """Return a class decorator that registers the decorated handler.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``name`` is already in use.
        TypeError
            If the decorated class does not subclass ``MagicLinkHandler``.
        """

        def decorator(cls: HandlerClass) -> HandlerClass:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: HandlerClass) -> None:
        """Register ``cls`` under ``name`` without decorator syntax.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``name`` is already registered.
        TypeError
            If ``cls`` is not a ``MagicLinkHandler`` subclass.
        """
        if name in self._handlers:
            raise PluginAlreadyRegisteredError(name)
        if not (isinstance(cls, type) and issubclass(cls, MagicLinkHandler)):
            raise TypeError(
                f"Cannot register {cls!r} under {name!r}: "
                "it must be a subclass of MagicLinkHandler."
            )
        self._handlers[name] = cls
        logger.debug("Registered handler %r -> %s", name, cls.__qualname__)

    def deregister(self, name: str) -> None:
        """Remove a handler from the registry.

        Raises
        ------
        PluginNotFoundError
            If ``name`` is not currently registered.
        """
        if name not in self._handlers:
            raise PluginNotFoundError(name, self._handlers)
        del self._handlers[name]
        logger.debug("Deregistered handler %r", name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> HandlerClass:
        """Return the class registered under ``name``.

        Raises
        ------
        PluginNotFoundError
            If no handler is registered under ``name``.
        """
        try:
            return self._handlers[name]
        except KeyError:
            raise PluginNotFoundError(name, self._handlers) from None

    def list_handlers(self) -> list[str]:
        """Return all registered handler names in alphabetical order."""
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_handlers())

    def __repr__(self) -> str:
        return f"HandlerRegistry(handlers={self.list_handlers()})"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def create(self, name: str, options: "MagicLinkOptions") -> MagicLinkHandler:
        """Instantiate the handler registered under ``name`` from ``options``."""
        return self.get(name).from_options(options)

    def build_chain(
        self,
        entries: Iterable[MagicLinkHandler | str] | None,
        options: "MagicLinkOptions",
    ) -> tuple[MagicLinkHandler, ...]:
        """Turn a list of handler names and instances into a handler chain.

        Parameters
        ----------
        entries:
            Handler instances, registered names, or a mix.  ``None``
            selects the default chain ``link``, ``platform-at``,
            ``github-at``.
        options:
            Passed to ``from_options`` of every handler built by name.

        Raises
        ------
        PluginNotFoundError
            If a name is not registered.
        """
        if entries is None:
            entries = DEFAULT_HANDLER_NAMES
        return tuple(
            self.create(entry, options) if isinstance(entry, str) else entry
            for entry in entries
        )

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register handlers declared as package entry-points.

        Handlers that are already registered are skipped with a debug log
        entry, so repeated calls are idempotent.  Entry points that fail
        to load or are not handler classes are logged and skipped.
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._handlers:
                logger.debug("Entry-point %r already registered; skipping.", ep.name)
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (PluginAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered; skipping.",
                    ep.name,
                )


handler_registry = HandlerRegistry()
handler_registry.register_class(LinkHandler.name, LinkHandler)
handler_registry.register_class(PlatformAtHandler.name, PlatformAtHandler)
handler_registry.register_class(GitHubAtHandler.name, GitHubAtHandler)
