"""Wormhole bodies from the Kopernicus Expansion wormhole component."""

from ..bodies import CelestialBody
from .base import CapabilityProvider, metadata_flag


class WormholeProvider(CapabilityProvider):
    """Reports bodies carrying a wormhole component."""

    @property
    def name(self) -> str:
        return "wormholes"

    @property
    def plugin(self) -> str:
        return "KEX-Wormholes"

    @property
    def min_version(self) -> str:
        return "1.0"

    @property
    def silent(self) -> bool:
        return True

    def is_wormhole(self, body: CelestialBody) -> bool:
        return metadata_flag(body, "wormhole")
