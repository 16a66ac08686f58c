"""Core domain records.

Submodules in core/ other than ``engine`` must not import from
handlers/, plugins/, integrations/ or cli/.  Import the engine from
``magic_link.core.engine`` directly.
"""
from __future__ import annotations

from magic_link.core.records import PartialLink, ResolvedLink

__all__ = ["PartialLink", "ResolvedLink"]
