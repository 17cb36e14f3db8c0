"""Singularity (black hole) bodies."""

from ..bodies import CelestialBody
from .base import CapabilityProvider, metadata_flag


class SingularityProvider(CapabilityProvider):
    """Reports bodies carrying a singularity object."""

    @property
    def name(self) -> str:
        return "singularity"

    @property
    def plugin(self) -> str:
        return "Singularity"

    @property
    def min_version(self) -> str:
        return "0.991"

    def is_singularity(self, body: CelestialBody) -> bool:
        return metadata_flag(body, "singularity")
