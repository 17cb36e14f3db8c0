"""
Named body sets ("programs") used to target strategies.

A program id selects the bodies a family of objectives applies to: the home
world, its moons, the other planets, gas giants with landable moons, and so on.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set

from .bodies import BodyGraph, CelestialBody
from .classification import BodyKind
from .hierarchy import HierarchyQuery
from .policies import GAS_GIANT, TERRESTRIAL

logger = logging.getLogger(__name__)


class ProgramId(str, Enum):
    KERBIN = "KerbinProgram"
    MOON = "MoonProgram"
    PLANETARY = "PlanetaryProgram"
    GAS_GIANT = "GasGiantProgram"
    IMPACTOR_PROBES = "ImpactorProbes"
    FLY_BY_PROBES = "FlyByProbes"


def _unique(bodies: Iterable[CelestialBody]) -> List[CelestialBody]:
    return list(dict.fromkeys(bodies))


class ProgramResolver:
    """
    Resolves program ids to sets of bodies.

    Results have set semantics (no duplicates, callers must not rely on
    order) but are returned as lists in discovery order so that repeated runs
    name their records identically.

    Args:
        graph: Body graph to query
        query: Hierarchy queries (defaults to HierarchyQuery.for_graph(graph))
    """

    def __init__(self, graph: BodyGraph, query: HierarchyQuery = None):
        self.graph = graph
        self.query = query or HierarchyQuery.for_graph(graph)
        self._logged_roots = False
        self._logged_ids: Set[str] = set()
        self._programs: Dict[str, Callable[[CelestialBody], Iterable[CelestialBody]]] = {
            ProgramId.KERBIN.value: self._kerbin_program,
            ProgramId.MOON.value: self._moon_program,
            ProgramId.PLANETARY.value: self._planetary_program,
            ProgramId.GAS_GIANT.value: self._gas_giant_program,
            ProgramId.IMPACTOR_PROBES.value: self._impactor_probes,
            ProgramId.FLY_BY_PROBES.value: self._fly_by_probes,
        }

    def system_roots(self) -> List[CelestialBody]:
        """All system roots reachable from the sun-equivalent."""
        roots = list(self.query.system_roots(self.graph.sun))
        if not self._logged_roots:
            self._logged_roots = True
            logger.info("System roots: " + ", ".join(f'"{r.name}"' for r in roots))
        return roots

    def resolve(self, program_id: str, home: Optional[CelestialBody] = None) -> List[CelestialBody]:
        """
        Resolve a program id to its bodies.

        Args:
            program_id: One of the ProgramId values; anything else selects every
                classifiable body
            home: Home body (defaults to the graph's home)

        Returns:
            Unique bodies selected by the program
        """
        program_id = program_id.value if isinstance(program_id, ProgramId) else str(program_id)
        home = home or self.graph.home
        program = self._programs.get(program_id, self._default_program)
        bodies = _unique(program(home))

        if program_id not in self._logged_ids:
            self._logged_ids.add(program_id)
            logger.info(
                f"Program {program_id}: " + ", ".join(f'"{b.name}"' for b in bodies)
            )
        return bodies

    def is_home_adjacent(self, body: CelestialBody, home: CelestialBody) -> bool:
        """Whether body is home, a child of home, or has home as a child."""
        return body is home or body.parent is home or home.parent is body

    def _kerbin_program(self, home: CelestialBody) -> Iterable[CelestialBody]:
        yield home

    def _moon_program(self, home: CelestialBody) -> Iterable[CelestialBody]:
        yield from home.children

        # Home may itself be a moon of a gas giant
        parent = home.parent
        if parent is not None and not self.query.is_system_root(parent):
            for sibling in parent.children:
                if sibling is not home:
                    yield sibling

    def _planetary_program(self, home: CelestialBody) -> Iterable[CelestialBody]:
        for root in self.system_roots():
            for node in self.query.planet_nodes_matching(root, TERRESTRIAL):
                if not self.is_home_adjacent(node, home):
                    yield node

    def _gas_giant_program(self, home: CelestialBody) -> Iterable[CelestialBody]:
        for root in self.system_roots():
            for node in self.query.planet_nodes_matching(root, GAS_GIANT):
                if self.is_home_adjacent(node, home):
                    continue
                solid_moons = self.query.bodies_under_node(node, solids_only=True)
                if next(solid_moons, None) is not None:
                    yield node

    def _impactor_probes(self, home: CelestialBody) -> Iterable[CelestialBody]:
        for root in self.system_roots():
            for node in self.query.planets_under_root(root):
                for body in self.query.bodies_under_node(
                    node, solids_only=True, include_primary=True
                ):
                    if body is not home:
                        yield body

    def _fly_by_probes(self, home: CelestialBody) -> Iterable[CelestialBody]:
        for root in self.system_roots():
            for node in self.query.planets_under_root(root):
                if not self.is_home_adjacent(node, home):
                    yield node

    def _default_program(self, home: CelestialBody) -> Iterable[CelestialBody]:
        for body in self.graph:
            if self.query.kind(body) is not BodyKind.NOT_APPLICABLE:
                yield body
