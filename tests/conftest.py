"""Shared test fixtures for markdown-magic-link.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "magic_link"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def platform_users() -> dict[str, Any]:
    """Platform-user table in the camelCase shape users write in config files."""
    return {
        "bilibili": {
            "lu-jiejie": {
                "link": "https://space.bilibili.com/123456",
                "avatarUrl": "https://i0.hdslb.com/bfs/face/avatar.jpg",
                "displayName": "Lu Jiejie",
            },
        },
        "twitter": {
            "someone": {
                "link": "https://twitter.com/someone",
                "avatarUrl": "https://pbs.twimg.com/profile_images/avatar.jpg",
            },
        },
    }
