"""
Optional capability providers for mod-defined body metadata.

Each provider wraps one third-party plugin. Providers whose plugin is absent
are simply inactive, so every capability query degrades to False.
"""

from .base import CapabilityProvider, metadata_flag
from .kopernicus import KopernicusProvider
from .registry import (
    REQUIRED_PLUGIN,
    REQUIRED_PLUGIN_VERSION,
    CapabilityRegistry,
    create_default_registry,
    parse_version,
)
from .singularity import SingularityProvider
from .wormholes import WormholeProvider

__all__ = [
    # Base
    "CapabilityProvider",
    "metadata_flag",
    # Registry
    "CapabilityRegistry",
    "create_default_registry",
    "parse_version",
    "REQUIRED_PLUGIN",
    "REQUIRED_PLUGIN_VERSION",
    # Providers
    "KopernicusProvider",
    "SingularityProvider",
    "WormholeProvider",
]
