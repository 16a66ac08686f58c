"""Post-handler resolution: default filling and image overrides."""
from __future__ import annotations

from magic_link.resolver.fields import LinkNormalizer, materialize
from magic_link.resolver.overrides import ImageOverride, apply_image_overrides

__all__ = ["ImageOverride", "LinkNormalizer", "apply_image_overrides", "materialize"]
