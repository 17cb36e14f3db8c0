"""
The body graph: celestial bodies and the forest they form.

Bodies are plain objects linked to their parent and children. A BodyGraph is a
read-only snapshot of that forest, built either by hand or from a JSON
document validated against SystemConfig.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .models import BodyConfig, SystemConfig


class CelestialBody:
    """
    A node of the body graph.

    Bodies compare and hash by identity; names are expected to be unique
    within a graph.

    Args:
        name: Unique identifier
        mass: Body mass
        radius: Body radius in meters
        has_solid_surface: Whether the body can be landed on
        is_star: Whether the body is a star
        is_home: Whether the body is the home world
        display_name: Human-facing name, defaults to name
        metadata: Host metadata read by capability providers
    """

    def __init__(
        self,
        name: str,
        mass: float,
        radius: float,
        has_solid_surface: bool = False,
        is_star: bool = False,
        is_home: bool = False,
        display_name: Optional[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        self.name = name
        self.mass = mass
        self.radius = radius
        self.has_solid_surface = has_solid_surface
        self.is_star = is_star
        self.is_home = is_home
        self.display_name = display_name
        self.metadata = metadata or {}
        self.parent: Optional[CelestialBody] = None
        self.children: List[CelestialBody] = []

    def __repr__(self) -> str:
        return f"CelestialBody({self.name!r})"

    def add_child(self, child: "CelestialBody") -> "CelestialBody":
        """Attach a body as the last child of this one and return it."""
        child.parent = self
        self.children.append(child)
        return child

    def walk(self) -> Iterator["CelestialBody"]:
        """Yield this body and all its descendants, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()


class BodyGraph:
    """
    Read-only snapshot of a forest of bodies.

    Args:
        roots: Parentless bodies; the first one is the sun-equivalent
        plugins: Installed host plugins mapped to versions (None when unknown)
    """

    def __init__(self, roots: List[CelestialBody], plugins: Optional[Dict[str, str]] = None):
        if not roots:
            raise ValueError("A body graph needs at least one root body")
        self.roots = list(roots)
        self.plugins = plugins
        self.bodies: List[CelestialBody] = [b for root in self.roots for b in root.walk()]
        self._by_name = {b.name: b for b in self.bodies}

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self.bodies)

    def __len__(self) -> int:
        return len(self.bodies)

    def __contains__(self, body: object) -> bool:
        return any(b is body for b in self.bodies)

    @property
    def sun(self) -> CelestialBody:
        """The primary root: the first body with no parent."""
        return self.roots[0]

    @property
    def home(self) -> CelestialBody:
        """
        The single body flagged as home.

        Raises:
            ValueError: If zero or several bodies are flagged as home
        """
        homes = [b for b in self.bodies if b.is_home]
        if len(homes) != 1:
            raise ValueError(f"Expected exactly one home body, found {len(homes)}")
        return homes[0]

    def get(self, name: str) -> Optional[CelestialBody]:
        """Get a body by name, or None if not found."""
        return self._by_name.get(name)

    @classmethod
    def from_config(cls, config: SystemConfig) -> "BodyGraph":
        """
        Build a graph from a validated SystemConfig.

        Raises:
            ValueError: If the document fails validate_system
        """
        errors = validate_system(config)
        if errors:
            raise ValueError("Invalid body graph:\n  " + "\n  ".join(errors))

        def _build(node: BodyConfig) -> CelestialBody:
            body = CelestialBody(
                name=node.name,
                mass=node.mass,
                radius=node.radius,
                has_solid_surface=node.solid,
                is_star=node.star,
                is_home=node.home,
                display_name=node.display_name,
                metadata=dict(node.metadata),
            )
            for child in node.children:
                body.add_child(_build(child))
            return body

        return cls([_build(root) for root in config.roots], plugins=config.plugins)


def load_body_graph(filepath: str | Path) -> BodyGraph:
    """
    Load a body graph from a JSON file.

    Args:
        filepath: Path to the JSON document (see SystemConfig)

    Returns:
        The constructed BodyGraph

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or fails validation
    """
    path = Path(filepath)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"The file {path} is not a valid JSON file: {e}") from e
    return BodyGraph.from_config(SystemConfig.model_validate(data))


def validate_system(config: SystemConfig) -> List[str]:
    """
    Validate a body-graph document and return any issues found.

    Args:
        config: Parsed document

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    seen: Dict[str, str] = {}
    homes = []

    def _validate_node(node: BodyConfig, path: str):
        if node.name in seen:
            errors.append(f"Duplicate body name '{node.name}' at {path} (first at {seen[node.name]})")
        else:
            seen[node.name] = path
        if node.home:
            homes.append(node.name)
        if node.mass < 0:
            errors.append(f"Negative mass at {path}")
        for child in node.children:
            _validate_node(child, f"{path}>{child.name}")

    for root in config.roots:
        _validate_node(root, root.name)

    if len(homes) != 1:
        errors.append(f"Expected exactly one home body, found {len(homes)}: {homes}")

    return errors
