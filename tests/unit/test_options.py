"""Unit tests for magic_link.config — options, coercion, and file loading."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import pytest

from magic_link.config import (
    ConfigError,
    LinkTarget,
    MagicLinkOptions,
    PlatformUser,
    load_options,
)
from magic_link.handlers import GitHubAtHandler
from magic_link.resolver.overrides import ImageOverride


# ===========================================================================
# ConfigError
# ===========================================================================


class TestConfigError:
    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise ConfigError("bad", "links_map.x")

    def test_message_contains_path(self) -> None:
        error = ConfigError("missing 'link'", "links_map.VueUse")
        assert str(error) == "links_map.VueUse: missing 'link'"
        assert error.path == "links_map.VueUse"

    def test_message_without_path(self) -> None:
        assert str(ConfigError("unknown option 'x'")) == "unknown option 'x'"


# ===========================================================================
# MagicLinkOptions construction
# ===========================================================================


class TestMagicLinkOptions:
    def test_defaults_are_empty(self) -> None:
        options = MagicLinkOptions()
        assert dict(options.links_map) == {}
        assert dict(options.platform_users) == {}
        assert options.image_overrides == ()
        assert options.handlers is None

    def test_string_links_become_targets(self) -> None:
        options = MagicLinkOptions(links_map={"VueUse": "https://vueuse.org/1"})
        assert options.links_map["VueUse"] == LinkTarget("https://vueuse.org/1")

    def test_override_pairs_become_rules(self) -> None:
        pattern = re.compile(r"^https://vueuse\.org/")
        options = MagicLinkOptions(image_overrides=[(pattern, "https://img/v.png")])
        assert options.image_overrides == (ImageOverride(pattern, "https://img/v.png"),)

    def test_links_map_is_read_only(self) -> None:
        options = MagicLinkOptions(links_map={"VueUse": "https://vueuse.org"})
        with pytest.raises(TypeError):
            options.links_map["Other"] = LinkTarget("https://other.example")  # type: ignore[index]

    def test_options_are_frozen(self) -> None:
        options = MagicLinkOptions()
        with pytest.raises(AttributeError):
            options.handlers = ("link",)  # type: ignore[misc]

    def test_caller_mapping_changes_do_not_leak(self) -> None:
        links = {"VueUse": "https://vueuse.org"}
        options = MagicLinkOptions(links_map=links)
        links["Other"] = "https://other.example"
        assert "Other" not in options.links_map

    def test_handlers_accept_names_and_instances(self) -> None:
        handler = GitHubAtHandler()
        options = MagicLinkOptions(handlers=["link", handler])
        assert options.handlers == ("link", handler)

    def test_handlers_reject_other_types(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            MagicLinkOptions(handlers=["link", 42])  # type: ignore[list-item]
        assert excinfo.value.path == "handlers.1"


# ===========================================================================
# MagicLinkOptions.from_dict
# ===========================================================================


class TestFromDict:
    def test_none_gives_defaults(self) -> None:
        assert MagicLinkOptions.from_dict(None) == MagicLinkOptions()

    def test_camel_case_keys(self, platform_users: dict[str, Any]) -> None:
        options = MagicLinkOptions.from_dict(
            {
                "linksMap": {
                    "VueUse": {"link": "https://vueuse.org/1", "imageUrl": "https://img/1.png"},
                },
                "platformUsers": platform_users,
            }
        )
        assert options.links_map["VueUse"] == LinkTarget("https://vueuse.org/1", "https://img/1.png")
        assert options.platform_users["bilibili"]["lu-jiejie"] == PlatformUser(
            link="https://space.bilibili.com/123456",
            avatar_url="https://i0.hdslb.com/bfs/face/avatar.jpg",
            display_name="Lu Jiejie",
        )
        assert options.platform_users["twitter"]["someone"].display_name is None

    def test_snake_case_keys(self) -> None:
        options = MagicLinkOptions.from_dict(
            {
                "platform_users": {
                    "x": {"me": {"link": "https://x.com/me", "avatar_url": "https://x.com/me.png"}},
                },
            }
        )
        assert options.platform_users["x"]["me"].avatar_url == "https://x.com/me.png"

    def test_override_forms(self) -> None:
        options = MagicLinkOptions.from_dict(
            {
                "imageOverrides": [
                    {"pattern": "^https://vueuse\\.org/1", "image": "https://img/1.png"},
                    {"match": "https://vueuse.org/", "image": "https://img/2.png"},
                    ["https://exact.example", "https://img/3.png"],
                ],
            }
        )
        first, second, third = options.image_overrides
        assert isinstance(first.matcher, re.Pattern)
        assert first.matches("https://vueuse.org/1")
        assert second.matcher == "https://vueuse.org/"
        assert third == ImageOverride("https://exact.example", "https://img/3.png")

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="unknown option 'linkMap'"):
            MagicLinkOptions.from_dict({"linkMap": {}})

    def test_same_option_twice(self) -> None:
        with pytest.raises(ConfigError, match="given twice"):
            MagicLinkOptions.from_dict({"linksMap": {}, "links_map": {}})

    def test_missing_avatar_reports_path(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            MagicLinkOptions.from_dict(
                {"platformUsers": {"bilibili": {"lu": {"link": "https://space.bilibili.com/1"}}}}
            )
        assert excinfo.value.path == "platform_users.bilibili.lu"
        assert "avatar_url" in str(excinfo.value)

    def test_link_target_missing_link(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            MagicLinkOptions.from_dict({"linksMap": {"VueUse": {"imageUrl": "https://img"}}})
        assert excinfo.value.path == "links_map.VueUse"

    def test_link_target_wrong_type(self) -> None:
        with pytest.raises(ConfigError):
            MagicLinkOptions.from_dict({"linksMap": {"VueUse": 42}})

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ConfigError, match="invalid pattern") as excinfo:
            MagicLinkOptions.from_dict({"imageOverrides": [{"pattern": "(", "image": "x"}]})
        assert excinfo.value.path == "image_overrides.0"

    def test_override_without_matcher(self) -> None:
        with pytest.raises(ConfigError, match="'match' or 'pattern'"):
            MagicLinkOptions.from_dict({"imageOverrides": [{"image": "x"}]})

    def test_overrides_must_be_a_list(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            MagicLinkOptions.from_dict({"imageOverrides": "https://img"})
        assert excinfo.value.path == "image_overrides"

    def test_top_level_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError, match="expected a mapping"):
            MagicLinkOptions.from_dict(["linksMap"])  # type: ignore[arg-type]


# ===========================================================================
# load_options
# ===========================================================================


class TestLoadOptions:
    def test_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "links.yaml"
        config.write_text(
            "linksMap:\n"
            "  VueUse: https://vueuse.org/1\n"
            "platformUsers:\n"
            "  bilibili:\n"
            "    lu-jiejie:\n"
            "      link: https://space.bilibili.com/123456\n"
            "      avatarUrl: https://i0.hdslb.com/bfs/face/avatar.jpg\n"
            "imageOverrides:\n"
            "  - pattern: '^https://vueuse\\.org/'\n"
            "    image: https://example.com/favicon.png\n"
            "handlers: [link, platform-at]\n",
            encoding="utf-8",
        )
        options = load_options(config)
        assert options.links_map["VueUse"].link == "https://vueuse.org/1"
        assert "lu-jiejie" in options.platform_users["bilibili"]
        assert options.image_overrides[0].matches("https://vueuse.org/x")
        assert options.handlers == ("link", "platform-at")

    def test_json_file(self, tmp_path: Path) -> None:
        config = tmp_path / "links.json"
        config.write_text('{"linksMap": {"VueUse": "https://vueuse.org"}}', encoding="utf-8")
        assert load_options(config).links_map["VueUse"].link == "https://vueuse.org"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config = tmp_path / "empty.yaml"
        config.write_text("", encoding="utf-8")
        assert load_options(config) == MagicLinkOptions()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "broken.yaml"
        config.write_text("linksMap: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="cannot parse"):
            load_options(config)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_options(tmp_path / "nope.yaml")
