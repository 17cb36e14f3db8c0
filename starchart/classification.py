"""
Body-type inference.

A body's kind is not stored anywhere: it is derived from its own flags and,
recursively, from the kind of the body it orbits. A solid body directly under
a star is a planet, the same body under a gas giant is a moon, and among the
children of a barycenter only the heaviest solid body is promoted to planet.
"""

from enum import Enum
from typing import Dict, Optional

from .bodies import CelestialBody
from .capabilities import CapabilityRegistry, create_default_registry

BARYCENTER_RADIUS_THRESHOLD = 100.0


class BodyKind(str, Enum):
    NOT_APPLICABLE = "NotApplicable"
    STAR = "Star"
    GAS_GIANT = "GasGiant"
    TERRESTRIAL = "Terrestrial"
    MOON = "Moon"
    BARYCENTER = "Barycenter"
    SINGULARITY = "Singularity"
    WORMHOLE = "Wormhole"


STELLAR_KINDS = frozenset({BodyKind.STAR, BodyKind.SINGULARITY})
REFERENCE_KINDS = frozenset({BodyKind.STAR, BodyKind.SINGULARITY, BodyKind.BARYCENTER})
PLANET_KINDS = frozenset({BodyKind.TERRESTRIAL, BodyKind.GAS_GIANT})


class Classifier:
    """
    Classifies bodies into BodyKind values.

    Results are memoized per instance; call clear_cache() if the graph changes.

    Args:
        capabilities: Registry answering optional capability queries
            (defaults to a registry with every provider available)
        barycenter_radius: Bodies at or below this radius are barycenters
    """

    def __init__(
        self,
        capabilities: CapabilityRegistry = None,
        barycenter_radius: float = BARYCENTER_RADIUS_THRESHOLD,
    ):
        self.capabilities = capabilities or create_default_registry()
        self.barycenter_radius = barycenter_radius
        self._cache: Dict[CelestialBody, BodyKind] = {}

    def clear_cache(self) -> None:
        self._cache.clear()

    def classify(self, body: Optional[CelestialBody]) -> BodyKind:
        """
        Classify a body.

        Args:
            body: Body to classify (None is allowed)

        Returns:
            The body's kind; configurations that match no rule give NOT_APPLICABLE
        """
        if body is None:
            return BodyKind.NOT_APPLICABLE
        kind = self._cache.get(body)
        if kind is None:
            kind = self._classify(body)
            self._cache[body] = kind
        return kind

    def is_solid(self, body: CelestialBody) -> bool:
        """Whether a body has a solid surface you could land on."""
        return body.has_solid_surface and not self.capabilities.is_wormhole(body)

    def _is_barycenter(self, body: CelestialBody) -> bool:
        return (
            body.radius <= self.barycenter_radius
            or self.capabilities.is_invisible(body)
            or self.capabilities.is_rnd_skip(body)
        )

    def _classify(self, body: CelestialBody) -> BodyKind:
        caps = self.capabilities

        if caps.is_hidden(body):
            return BodyKind.NOT_APPLICABLE

        if self._is_barycenter(body):
            return BodyKind.BARYCENTER

        if caps.is_singularity(body):
            return BodyKind.SINGULARITY

        if caps.is_wormhole(body):
            return BodyKind.WORMHOLE

        if body.is_star:
            return BodyKind.STAR

        is_solid = self.is_solid(body)
        reference_type = self.classify(body.parent)
        if reference_type in REFERENCE_KINDS:
            # Under a barycenter only the heaviest solid child ranks as a planet
            if reference_type is BodyKind.BARYCENTER and is_solid:
                for sibling in reversed(body.parent.children):
                    if sibling.mass > body.mass:
                        return BodyKind.MOON

            if is_solid:
                return BodyKind.TERRESTRIAL

        if is_solid:
            return BodyKind.MOON

        return BodyKind.GAS_GIANT
