"""
Kopernicus storage-component metadata.

Kopernicus lets planet packs mark bodies as invisible in scaled space (the
usual way of building a barycenter) and control how the R&D archive shows
them.
"""

from ..bodies import CelestialBody
from .base import CapabilityProvider, metadata_flag

INVISIBLE_KEY = "invisibleScaledSpace"
RND_KEY = "hiddenRnD"


def rnd_visibility(body: CelestialBody) -> str:
    """Return the body's R&D visibility ("visible", "hidden" or "skip")."""
    return str(body.metadata.get(RND_KEY, "visible")).strip().lower()


class KopernicusProvider(CapabilityProvider):
    """Answers hidden/invisible/R&D-skip queries from Kopernicus metadata."""

    @property
    def name(self) -> str:
        return "kopernicus"

    @property
    def plugin(self) -> str:
        return "Kopernicus"

    @property
    def min_version(self) -> str:
        return "1.12.227"

    def is_hidden(self, body: CelestialBody) -> bool:
        return rnd_visibility(body) == "hidden"

    def is_invisible(self, body: CelestialBody) -> bool:
        return metadata_flag(body, INVISIBLE_KEY)

    def is_rnd_skip(self, body: CelestialBody) -> bool:
        return rnd_visibility(body) == "skip"
