"""Unit tests for magic_link.plugins.registry — HandlerRegistry, error types,
entry-point loading, and chain construction.
"""
from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from magic_link.config import MagicLinkOptions
from magic_link.core.records import PartialLink
from magic_link.handlers import GitHubAtHandler, LinkHandler, MagicLinkHandler, PlatformAtHandler
from magic_link.plugins.registry import (
    DEFAULT_HANDLER_NAMES,
    HandlerRegistry,
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    handler_registry,
)


# ---------------------------------------------------------------------------
# Test fixtures — concrete handlers
# ---------------------------------------------------------------------------


class NpmHandler(MagicLinkHandler):
    name = "npm"

    def resolve(self, payload: str) -> PartialLink | None:
        if not payload.startswith("npm:"):
            return None
        return PartialLink(link=f"https://www.npmjs.com/package/{payload[4:]}", type="npm")


class PypiHandler(MagicLinkHandler):
    name = "pypi"

    def resolve(self, payload: str) -> PartialLink | None:
        return None


class NotAHandler:
    """Does NOT subclass MagicLinkHandler — used for error path testing."""
    pass


def _fresh_registry() -> HandlerRegistry:
    """Return a new empty registry for each test."""
    return HandlerRegistry()


# ===========================================================================
# Error types
# ===========================================================================


class TestPluginNotFoundError:
    def test_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            raise PluginNotFoundError("npm", ["link"])

    def test_has_plugin_name_attribute(self) -> None:
        assert PluginNotFoundError("npm", ["link"]).plugin_name == "npm"

    def test_message_lists_available_handlers(self) -> None:
        error = PluginNotFoundError("npm", ["link", "github-at"])
        assert "github-at, link" in str(error)


class TestPluginAlreadyRegisteredError:
    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise PluginAlreadyRegisteredError("npm")

    def test_message_contains_name(self) -> None:
        assert "npm" in str(PluginAlreadyRegisteredError("npm"))


# ===========================================================================
# Registration
# ===========================================================================


class TestRegistration:
    def test_empty_registry(self) -> None:
        registry = _fresh_registry()
        assert len(registry) == 0
        assert registry.list_handlers() == []

    def test_decorator_registers_and_returns_class(self) -> None:
        registry = _fresh_registry()

        @registry.register("local")
        class LocalHandler(MagicLinkHandler):
            def resolve(self, payload: str) -> PartialLink | None:
                return None

        assert registry.get("local") is LocalHandler

    def test_duplicate_name_raises(self) -> None:
        registry = _fresh_registry()
        registry.register_class("npm", NpmHandler)
        with pytest.raises(PluginAlreadyRegisteredError):
            registry.register_class("npm", PypiHandler)

    def test_wrong_base_class_raises_type_error(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(TypeError):
            registry.register_class("bad", NotAHandler)  # type: ignore[arg-type]

    def test_non_class_raises_type_error(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(TypeError):
            registry.register_class("bad", "not_a_class")  # type: ignore[arg-type]

    def test_register_logs_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        with caplog.at_level(logging.DEBUG, logger="magic_link.plugins.registry"):
            registry.register_class("logged-handler", NpmHandler)
        assert "logged-handler" in caplog.text

    def test_deregister(self) -> None:
        registry = _fresh_registry()
        registry.register_class("npm", NpmHandler)
        registry.deregister("npm")
        assert "npm" not in registry

    def test_deregister_unknown_raises(self) -> None:
        with pytest.raises(PluginNotFoundError):
            _fresh_registry().deregister("ghost")


# ===========================================================================
# Lookup
# ===========================================================================


class TestLookup:
    def test_get_unknown_raises(self) -> None:
        with pytest.raises(PluginNotFoundError):
            _fresh_registry().get("ghost")

    def test_list_and_iterate_sorted(self) -> None:
        registry = _fresh_registry()
        registry.register_class("pypi", PypiHandler)
        registry.register_class("npm", NpmHandler)
        assert registry.list_handlers() == ["npm", "pypi"]
        assert list(registry) == ["npm", "pypi"]

    def test_repr_lists_handlers(self) -> None:
        registry = _fresh_registry()
        registry.register_class("npm", NpmHandler)
        assert "npm" in repr(registry)


class TestBuiltinRegistry:
    def test_builtins_are_registered(self) -> None:
        assert handler_registry.get("link") is LinkHandler
        assert handler_registry.get("platform-at") is PlatformAtHandler
        assert handler_registry.get("github-at") is GitHubAtHandler

    def test_default_order(self) -> None:
        assert DEFAULT_HANDLER_NAMES == ("link", "platform-at", "github-at")


# ===========================================================================
# Chain construction
# ===========================================================================


class TestBuildChain:
    def test_default_chain(self) -> None:
        chain = handler_registry.build_chain(None, MagicLinkOptions())
        assert [type(h) for h in chain] == [LinkHandler, PlatformAtHandler, GitHubAtHandler]

    def test_names_and_instances_mixed(self) -> None:
        registry = _fresh_registry()
        registry.register_class("npm", NpmHandler)
        github = GitHubAtHandler()
        chain = registry.build_chain(["npm", github], MagicLinkOptions())
        assert isinstance(chain[0], NpmHandler)
        assert chain[1] is github

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(PluginNotFoundError):
            _fresh_registry().build_chain(["ghost"], MagicLinkOptions())

    def test_handlers_receive_options(self) -> None:
        options = MagicLinkOptions(links_map={"VueUse": "https://vueuse.org/1"})
        (link_handler,) = handler_registry.build_chain(["link"], options)
        parsed = link_handler.resolve("VueUse")
        assert parsed is not None
        assert parsed.link == "https://vueuse.org/1"


# ===========================================================================
# load_entrypoints
# ===========================================================================


class TestLoadEntrypoints:
    def test_empty_group_does_nothing(self) -> None:
        registry = _fresh_registry()
        with patch(
            "magic_link.plugins.registry.importlib.metadata.entry_points",
            return_value=[],
        ):
            registry.load_entrypoints()
        assert len(registry) == 0

    def test_registers_valid_handler(self) -> None:
        registry = _fresh_registry()
        mock_ep = MagicMock()
        mock_ep.name = "npm"
        mock_ep.load.return_value = NpmHandler

        with patch(
            "magic_link.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ) as entry_points:
            registry.load_entrypoints()

        entry_points.assert_called_once_with(group="magic_link.handlers")
        assert registry.get("npm") is NpmHandler

    def test_skips_already_registered(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        registry.register_class("npm", NpmHandler)
        mock_ep = MagicMock()
        mock_ep.name = "npm"

        with patch(
            "magic_link.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            with caplog.at_level(logging.DEBUG, logger="magic_link.plugins.registry"):
                registry.load_entrypoints()

        assert "npm" in caplog.text
        mock_ep.load.assert_not_called()

    def test_load_failure_is_logged_and_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        mock_ep = MagicMock()
        mock_ep.name = "broken"
        mock_ep.load.side_effect = ImportError("no module named broken_handlers")

        with patch(
            "magic_link.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            with caplog.at_level(logging.ERROR, logger="magic_link.plugins.registry"):
                registry.load_entrypoints()

        assert len(registry) == 0
        assert "broken" in caplog.text

    def test_wrong_type_is_logged_and_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        mock_ep = MagicMock()
        mock_ep.name = "not-a-handler"
        mock_ep.load.return_value = NotAHandler

        with patch(
            "magic_link.plugins.registry.importlib.metadata.entry_points",
            return_value=[mock_ep],
        ):
            with caplog.at_level(logging.WARNING, logger="magic_link.plugins.registry"):
                registry.load_entrypoints()

        assert len(registry) == 0
        assert "not-a-handler" in caplog.text
