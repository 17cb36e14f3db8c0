"""
Base capability provider interface for optional third-party body metadata.

Mods can add body kinds the host does not know about (singularities,
wormholes) or flag bodies as hidden or invisible. Each such source is wrapped
in a CapabilityProvider; the classifier only ever talks to the providers
through the CapabilityRegistry, never to a concrete plugin.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..bodies import CelestialBody


def metadata_flag(body: CelestialBody, key: str) -> bool:
    """
    Read a boolean-like metadata entry from a body.

    Strings such as "True", "yes" or "1" count as set; anything missing is False.
    """
    value: Any = body.metadata.get(key)
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


class CapabilityProvider(ABC):
    """
    Abstract base class for optional capability providers.

    A provider answers capability queries for the bodies it knows about. Every
    query defaults to False so a provider only overrides what its plugin
    actually supplies.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this provider."""
        pass

    @property
    @abstractmethod
    def plugin(self) -> str:
        """Name of the host plugin that must be installed for this provider."""
        pass

    @property
    def min_version(self) -> str:
        """Minimum plugin version this provider understands."""
        return "0"

    @property
    def silent(self) -> bool:
        """Whether a missing plugin is only worth a debug message."""
        return False

    def is_hidden(self, body: CelestialBody) -> bool:
        return False

    def is_invisible(self, body: CelestialBody) -> bool:
        return False

    def is_rnd_skip(self, body: CelestialBody) -> bool:
        return False

    def is_singularity(self, body: CelestialBody) -> bool:
        return False

    def is_wormhole(self, body: CelestialBody) -> bool:
        return False
