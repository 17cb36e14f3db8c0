import json

import pytest

from starchart.bodies import BodyGraph, CelestialBody
from starchart.classification import Classifier
from starchart.confignode import parse_config
from starchart.hierarchy import HierarchyQuery
from starchart.programs import ProgramResolver


def make_body(name, mass=1.0e20, radius=100000.0, solid=True, **kwargs):
    return CelestialBody(name, mass, radius, has_solid_surface=solid, **kwargs)


def make_star(name, mass=1.0e28, radius=2.6e8):
    return CelestialBody(name, mass, radius, is_star=True)


@pytest.fixture
def kerbol():
    """
    Sun
    ├── Kerbin (home) -> Mun, Minmus
    ├── Duna -> Ike
    ├── Jool (gas giant) -> Laythe, Vall
    ├── Sarnus (gas giant, no moons)
    └── Eeloo
    """
    sun = make_star("Sun")
    kerbin = sun.add_child(make_body("Kerbin", mass=5.3e22, radius=600000, is_home=True))
    kerbin.add_child(make_body("Mun", mass=9.8e20, radius=200000, display_name="The Mun^N"))
    kerbin.add_child(make_body("Minmus", mass=2.6e19, radius=60000))
    duna = sun.add_child(make_body("Duna", mass=4.5e21, radius=320000))
    duna.add_child(make_body("Ike", mass=2.8e20, radius=130000))
    jool = sun.add_child(make_body("Jool", mass=4.2e24, radius=6000000, solid=False))
    jool.add_child(make_body("Laythe", mass=2.9e22, radius=500000))
    jool.add_child(make_body("Vall", mass=3.1e21, radius=300000))
    sun.add_child(make_body("Sarnus", mass=1.0e24, radius=5000000, solid=False))
    sun.add_child(make_body("Eeloo", mass=1.1e21, radius=210000))
    return BodyGraph([sun])


@pytest.fixture
def binary():
    """
    S
    ├── Home (home)
    └── B (barycenter)
        ├── A (mass 10) -> A1
        └── C (mass 5) -> C1
    """
    s = make_star("S")
    s.add_child(make_body("Home", mass=1.0e22, radius=600000, is_home=True))
    b = s.add_child(make_body("B", mass=15, radius=50, solid=False))
    a = b.add_child(make_body("A", mass=10, radius=1000))
    c = b.add_child(make_body("C", mass=5, radius=1000))
    a.add_child(make_body("A1", mass=1, radius=1000))
    c.add_child(make_body("C1", mass=1, radius=1000))
    return BodyGraph([s])


@pytest.fixture
def sigma():
    """
    S
    ├── Home (home)
    └── P (barycenter)
        ├── Prime -> Second, Tiny
        └── Helper (hidden)
    """
    s = make_star("S")
    s.add_child(make_body("Home", mass=1.0e22, radius=600000, is_home=True))
    p = s.add_child(make_body("P", mass=20, radius=10, solid=False))
    prime = p.add_child(make_body("Prime", mass=18, radius=500000))
    p.add_child(make_body("Helper", mass=0, radius=1000, metadata={"hiddenRnD": "hidden"}))
    prime.add_child(make_body("Second", mass=2, radius=200000))
    prime.add_child(make_body("Tiny", mass=0.1, radius=1000))
    return BodyGraph([s])


@pytest.fixture
def query():
    return HierarchyQuery(Classifier())


@pytest.fixture
def resolver_for(query):
    def _resolver(graph):
        return ProgramResolver(graph, query)

    return _resolver


@pytest.fixture
def level_template():
    document = parse_config(
        """
        STRATEGY_LEVEL_EXPAND
        {
            name = Outreach
            title = Public Outreach
            desc = Make $homeWorld care.
            groupTag = Outreach
            icon = Strategia/icons/Outreach
            factorSliderSteps = 3
            requiredReputation = 0
            requiredReputation
            {
                2 = 100
                3 = 250
            }
            EFFECT
            {
                name = CurrencyOperation
                multiplier = 1.1
                multiplier
                {
                    2 = 1.2
                }
            }
            EFFECT
            {
                name = AdvancedOutreach
                minLevel = 3
            }
        }
        """
    )
    return document.get_node("STRATEGY_LEVEL_EXPAND")


@pytest.fixture
def system_file(tmp_path):
    """Write a small body-graph document and return its path."""

    def _write(plugins=None, name="system.json"):
        data = {
            "root": {
                "name": "Sun",
                "mass": 1.0e28,
                "radius": 2.6e8,
                "star": True,
                "children": [
                    {
                        "name": "Kerbin",
                        "mass": 5.3e22,
                        "radius": 600000,
                        "solid": True,
                        "home": True,
                        "children": [
                            {"name": "Mun", "mass": 9.8e20, "radius": 200000, "solid": True},
                            {"name": "Minmus", "mass": 2.6e19, "radius": 60000, "solid": True},
                        ],
                    },
                    {
                        "name": "Jool",
                        "mass": 4.2e24,
                        "radius": 6000000,
                        "children": [
                            {"name": "Laythe", "mass": 2.9e22, "radius": 500000, "solid": True},
                        ],
                    },
                ],
            }
        }
        if plugins is not None:
            data["plugins"] = plugins
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "strategies.cfg"
    path.write_text(
        """
STRATEGY_LEVEL_EXPAND
{
    name = Outreach
    title = Public Outreach
    groupTag = Outreach
    factorSliderSteps = 2
}

STRATEGY_BODY_EXPAND
{
    id = MoonProgram
    name = MoonProgram
    title = $theBody Program
    EFFECT
    {
        name = ReachedBodyRequirement
        body = $body
    }
}
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def body_factory():
    return make_body


@pytest.fixture
def star_factory():
    return make_star
