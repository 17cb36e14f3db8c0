"""
Body progress requirements.

Strategy effects such as "must have landed on one of these bodies" are
expressed as a CheckKind plus a set of bodies. A single evaluator checks a
kind against a body's ProgressNode, and a verb table turns the kind into
requirement text.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .bodies import CelestialBody
from .confignode import ConfigNode
from .formatting import body_list
from .hierarchy import HierarchyQuery
from .models import ProgressNode
from .programs import ProgramResolver


class CheckKind(str, Enum):
    REACHED = "reached"
    ORBITED = "orbited"
    LANDED = "landed"
    RETURNED_FROM_ORBIT = "returned_from_orbit"
    RETURNED_FROM_SURFACE = "returned_from_surface"
    REACHED_MANNED = "reached_manned"
    ORBITED_MANNED = "orbited_manned"
    LANDED_MANNED = "landed_manned"
    RETURNED_FROM_ORBIT_MANNED = "returned_from_orbit_manned"
    RETURNED_FROM_SURFACE_MANNED = "returned_from_surface_manned"


VERB_PHRASES: Dict[CheckKind, str] = {
    CheckKind.REACHED: "reached",
    CheckKind.ORBITED: "orbited",
    CheckKind.LANDED: "landed on",
    CheckKind.RETURNED_FROM_ORBIT: "returned from orbit of",
    CheckKind.RETURNED_FROM_SURFACE: "returned from the surface of",
    CheckKind.REACHED_MANNED: "performed a crewed fly-by of",
    CheckKind.ORBITED_MANNED: "orbited with a crew around",
    CheckKind.LANDED_MANNED: "landed a crew on",
    CheckKind.RETURNED_FROM_ORBIT_MANNED: "returned a crew from orbit of",
    CheckKind.RETURNED_FROM_SURFACE_MANNED: "returned a crew from the surface of",
}

_CHECKS: Dict[CheckKind, Callable[[ProgressNode], bool]] = {
    CheckKind.REACHED: lambda n: n.reached,
    CheckKind.ORBITED: lambda n: n.orbit.reached,
    CheckKind.LANDED: lambda n: n.landing.reached,
    CheckKind.RETURNED_FROM_ORBIT: lambda n: n.return_from_orbit.reached,
    CheckKind.RETURNED_FROM_SURFACE: lambda n: n.return_from_surface.reached,
    CheckKind.REACHED_MANNED: lambda n: n.fly_by.reached and n.fly_by.complete_manned,
    CheckKind.ORBITED_MANNED: lambda n: n.orbit.reached and n.orbit.complete_manned,
    CheckKind.LANDED_MANNED: lambda n: n.landing.reached and n.landing.complete_manned,
    CheckKind.RETURNED_FROM_ORBIT_MANNED: (
        lambda n: n.return_from_orbit.reached and n.return_from_orbit.complete_manned
    ),
    # A crew member's own landing log counts as a crewed surface return
    CheckKind.RETURNED_FROM_SURFACE_MANNED: (
        lambda n: (n.return_from_surface.reached and n.return_from_surface.complete_manned)
        or n.crew_landed
    ),
}

# EFFECT node names mapped to the check they perform
REQUIREMENT_EFFECTS: Dict[str, CheckKind] = {
    "ReachedBodyRequirement": CheckKind.REACHED,
    "OrbitBodyRequirement": CheckKind.ORBITED,
    "LandedBodyRequirement": CheckKind.LANDED,
    "ReturnFromOrbitRequirement": CheckKind.RETURNED_FROM_ORBIT,
    "ReturnFromSurfaceRequirement": CheckKind.RETURNED_FROM_SURFACE,
    "ReachedBodyMannedRequirement": CheckKind.REACHED_MANNED,
    "OrbitBodyMannedRequirement": CheckKind.ORBITED_MANNED,
    "LandedBodyMannedRequirement": CheckKind.LANDED_MANNED,
    "ReturnFromOrbitMannedRequirement": CheckKind.RETURNED_FROM_ORBIT_MANNED,
    "ReturnFromSurfaceMannedRequirement": CheckKind.RETURNED_FROM_SURFACE_MANNED,
}


def check(kind: CheckKind, node: ProgressNode) -> bool:
    """Whether the progress recorded in node satisfies kind."""
    return bool(_CHECKS[kind](node))


class CelestialBodyRequirement(BaseModel):
    """
    A progress requirement over a set of bodies.

    The requirement is met as soon as any listed body passes the check; with
    invert it is met only while none does.

    Attributes:
        kind: The check to perform
        bodies: Bodies the check applies to
        invert: Require that no body passes
        default_unmet_reason: Explain unmet, non-inverted requirements
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: CheckKind
    bodies: List[CelestialBody]
    invert: bool = False
    default_unmet_reason: bool = False

    @property
    def verbed(self) -> str:
        return VERB_PHRASES[self.kind]

    def requirement_text(self, query: HierarchyQuery) -> str:
        """E.g. "Must have landed on the Mun or Minmus"."""
        bodies = [b for b in self.bodies if not query.is_barycenter(b)]
        negation = "not " if self.invert else ""
        return f"Must {negation}have {self.verbed} {body_list(bodies, 'or')}"

    def requirement_met(self, progress: Iterable[ProgressNode]) -> Tuple[bool, Optional[str]]:
        """
        Evaluate the requirement against recorded progress.

        Args:
            progress: Progress nodes, one per body

        Returns:
            (met, unmet_reason); unmet_reason is None when met or unexplained
        """
        names = {b.name for b in self.bodies}
        for node in progress:
            if node.body in names and check(self.kind, node):
                if self.invert:
                    return False, f"Have {self.verbed} {node.body}"
                return True, None

        if self.invert:
            return True, None
        if self.default_unmet_reason:
            return False, f"Haven't {self.verbed} {body_list(self.bodies, 'or')}"
        return False, None

    @classmethod
    def from_effect(
        cls, effect: ConfigNode, resolver: ProgramResolver
    ) -> "CelestialBodyRequirement":
        """
        Build a requirement from an expanded EFFECT node.

        Bodies come from the effect's program "id", else its "body" values,
        else the home body.

        Raises:
            ValueError: If the effect is not a body requirement or names an
                unknown body
        """
        effect_name = effect.get_value("name", "")
        if effect_name not in REQUIREMENT_EFFECTS:
            raise ValueError(f"'{effect_name}' is not a body requirement effect")

        graph = resolver.graph
        program_id = effect.get_value("id", "")
        if program_id:
            bodies = resolver.resolve(program_id)
        elif effect.has_value("body"):
            bodies = []
            for name in effect.get_values("body"):
                body = graph.get(name)
                if body is None:
                    raise ValueError(f"Unknown body '{name}' in {effect_name}")
                bodies.append(body)
        else:
            bodies = [graph.home]

        invert = effect.get_value("invert", "false").strip().lower() == "true"
        return cls(kind=REQUIREMENT_EFFECTS[effect_name], bodies=bodies, invert=invert)
