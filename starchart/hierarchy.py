"""
Queries over the classified body hierarchy.

This module derives system roots, planet nodes, moon lists and barycenter
primary/secondary splits from a Classifier, and renders the hierarchy as an
ASCII tree.

A planetary barycenter stands for a whole binary planet. Its primary and
secondary are normally its two heaviest eligible children. A "sigma binary" is
the special shape where the barycenter has a single real child and the true
secondary orbits that child instead; lookups then descend one level.
"""

from typing import Iterator, List, Optional

from .bodies import BodyGraph, CelestialBody
from .capabilities import create_default_registry
from .classification import PLANET_KINDS, STELLAR_KINDS, BodyKind, Classifier
from .policies import BodyPolicy

_NON_COMPONENT_KINDS = STELLAR_KINDS | {BodyKind.BARYCENTER, BodyKind.NOT_APPLICABLE}


class HierarchyQuery:
    """
    Hierarchy queries built on a Classifier.

    Args:
        classifier: Classifier used for every kind lookup
    """

    def __init__(self, classifier: Classifier = None):
        self.classifier = classifier or Classifier()

    @classmethod
    def for_graph(cls, graph: BodyGraph) -> "HierarchyQuery":
        """Queries whose classifier only consults the plugins in the graph's manifest."""
        return cls(Classifier(create_default_registry(graph.plugins)))

    def kind(self, body: Optional[CelestialBody]) -> BodyKind:
        return self.classifier.classify(body)

    # ------------------------------------------------------------------
    # Barycenters
    # ------------------------------------------------------------------

    def is_barycenter(self, body: Optional[CelestialBody]) -> bool:
        return self.kind(body) is BodyKind.BARYCENTER

    def is_stellar_barycenter(self, body: Optional[CelestialBody]) -> bool:
        """A barycenter with at least one star or singularity among its children."""
        return self.is_barycenter(body) and any(
            self.kind(child) in STELLAR_KINDS for child in body.children
        )

    def is_planetary_barycenter(self, body: Optional[CelestialBody]) -> bool:
        """A barycenter none of whose children is stellar."""
        return self.is_barycenter(body) and not self.is_stellar_barycenter(body)

    def is_sigma_binary(self, body: Optional[CelestialBody]) -> bool:
        """
        A planetary barycenter with exactly one real child plus hidden helpers.
        """
        if not self.is_planetary_barycenter(body):
            return False
        real = [c for c in body.children if self.kind(c) is not BodyKind.NOT_APPLICABLE]
        return len(real) == 1 and len(body.children) > 1

    def _components(self, bodies: List[CelestialBody]) -> List[CelestialBody]:
        """Eligible binary components, heaviest first."""
        eligible = [b for b in bodies if self.kind(b) not in _NON_COMPONENT_KINDS]
        return sorted(eligible, key=lambda b: b.mass, reverse=True)

    def barycenter_primary(self, body: Optional[CelestialBody]) -> Optional[CelestialBody]:
        """
        The primary of a planetary barycenter.

        Returns:
            The heaviest component, or None if body is not a planetary
            barycenter or has no components
        """
        if not self.is_planetary_barycenter(body):
            return None
        components = self._components(body.children)
        return components[0] if components else None

    def barycenter_secondary(self, body: Optional[CelestialBody]) -> Optional[CelestialBody]:
        """
        The secondary of a planetary barycenter.

        For a sigma binary the secondary is the heaviest component orbiting
        the primary; otherwise it is the barycenter's second-heaviest
        component.
        """
        if not self.is_planetary_barycenter(body):
            return None
        if self.is_sigma_binary(body):
            primary = self.barycenter_primary(body)
            if primary is None:
                return None
            components = self._components(primary.children)
            return components[0] if components else None
        components = self._components(body.children)
        return components[1] if len(components) > 1 else None

    def barycenter_primary_and_secondary(self, body: Optional[CelestialBody]) -> List[CelestialBody]:
        """Primary then secondary, skipping whichever is absent."""
        return [
            b
            for b in (self.barycenter_primary(body), self.barycenter_secondary(body))
            if b is not None
        ]

    def primary_body(self, body: CelestialBody) -> CelestialBody:
        """The barycenter's primary, or the body itself for anything else."""
        return self.barycenter_primary(body) or body

    def display_body(self, body: CelestialBody) -> CelestialBody:
        """The body that stands in for this one by name: a sigma binary's primary."""
        if self.is_sigma_binary(body):
            return self.barycenter_primary(body) or body
        return body

    def primary_and_secondary(self, body: CelestialBody) -> List[CelestialBody]:
        """Both components of a planetary barycenter, otherwise the body alone."""
        if self.is_planetary_barycenter(body):
            return self.barycenter_primary_and_secondary(body)
        return [body]

    # ------------------------------------------------------------------
    # Systems and planets
    # ------------------------------------------------------------------

    def is_system_root(self, body: Optional[CelestialBody]) -> bool:
        """A star, a singularity, or a stellar barycenter."""
        return self.kind(body) in STELLAR_KINDS or self.is_stellar_barycenter(body)

    def system_roots(self, start: Optional[CelestialBody]) -> Iterator[CelestialBody]:
        """
        Yield start and, recursively, every stellar body orbiting it.

        Order is depth-first, parents before children, children in host order.

        Args:
            start: Body to start from, usually the sun-equivalent
        """
        if start is None:
            return

        yield start

        for child in start.children:
            if self.is_system_root(child):
                yield from self.system_roots(child)

    def planets_under_root(self, root: Optional[CelestialBody]) -> List[CelestialBody]:
        """
        Planet nodes orbiting a root.

        Terrestrial and gas giant children, plus planetary barycenters standing
        for a whole binary planet.
        """
        if root is None:
            return []
        return [
            child
            for child in root.children
            if self.kind(child) in PLANET_KINDS or self.is_planetary_barycenter(child)
        ]

    def planet_nodes_matching(
        self, root: Optional[CelestialBody], policy: BodyPolicy
    ) -> List[CelestialBody]:
        """
        Planet nodes whose effective primary satisfies a policy.

        Args:
            root: System root
            policy: Policy applied to the barycenter's primary, or to the
                planet itself for standalone planets

        Returns:
            Matching planet nodes (barycenters are returned as themselves)
        """
        matching = []
        for node in self.planets_under_root(root):
            primary = self.barycenter_primary(node) if self.is_barycenter(node) else node
            if primary is not None and policy.accept(primary, self.classifier):
                matching.append(node)
        return matching

    def bodies_under_node(
        self,
        node: Optional[CelestialBody],
        solids_only: bool = False,
        include_barycenter: bool = False,
        include_primary: bool = False,
    ) -> Iterator[CelestialBody]:
        """
        Yield the bodies making up a planet node, primary before secondary before moons.

        Args:
            node: A planetary barycenter or a standalone planet
            solids_only: Only yield bodies with a solid surface (the barycenter
                itself is exempt)
            include_barycenter: Yield a barycenter node first
            include_primary: Yield the primary (or the standalone planet)

        Yields nothing for any other kind of node.
        """
        if node is None:
            return

        def keep(body: Optional[CelestialBody]) -> bool:
            if body is None or self.kind(body) is BodyKind.NOT_APPLICABLE:
                return False
            return not solids_only or self.classifier.is_solid(body)

        if self.is_planetary_barycenter(node):
            primary = self.barycenter_primary(node)
            secondary = self.barycenter_secondary(node)

            if include_barycenter:
                yield node
            if include_primary and keep(primary):
                yield primary
            if keep(secondary):
                yield secondary

            for child in node.children:
                if child is not primary and child is not secondary and keep(child):
                    yield child

            if primary is not None:
                for child in primary.children:
                    if child is not secondary and keep(child):
                        yield child

            if secondary is not None:
                for child in secondary.children:
                    if keep(child):
                        yield child

        elif self.kind(node) in PLANET_KINDS:
            if include_primary and keep(node):
                yield node
            for child in node.children:
                if keep(child):
                    yield child


def format_tree_as_string(graph: BodyGraph, classifier: Classifier = None) -> str:
    """
    Format a body graph as an ASCII tree annotated with body kinds.

    Args:
        graph: Graph to render
        classifier: Classifier used for the annotations

    Returns:
        String representation of the tree

    Example:
        Sun [Star]
        └── Kerbin [Terrestrial] (home)
            └── Mun [Moon]
    """
    classifier = classifier or Classifier()
    lines = []

    def _label(body: CelestialBody) -> str:
        label = f"{body.name} [{classifier.classify(body).value}]"
        return label + " (home)" if body.is_home else label

    def _format_level(body: CelestialBody, pfx: str):
        children = body.children
        for i, child in enumerate(children):
            is_last = i == len(children) - 1
            connector = "└── " if is_last else "├── "
            lines.append(f"{pfx}{connector}{_label(child)}")
            _format_level(child, pfx + ("    " if is_last else "│   "))

    for root in graph.roots:
        lines.append(_label(root))
        _format_level(root, "")
    return "\n".join(lines)
