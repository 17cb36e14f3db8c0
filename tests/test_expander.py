import pytest

from starchart.bodies import BodyGraph
from starchart.classification import BodyKind
from starchart.confignode import parse_config
from starchart.expander import ExpansionError, TemplateExpander


def body_template(text):
    return parse_config(text).get_node("STRATEGY_BODY_EXPAND")


MOON_TEMPLATE = """
STRATEGY_BODY_EXPAND
{
    id = MoonProgram
    name = MoonProgram
    title = $theBody Program
    desc = Orbit $body, $homeWorld's moon
    title
    {
        Minmus = Minty Program
    }
    EFFECT
    {
        name = ReachedBodyRequirement
        body = $body
    }
}
"""


@pytest.fixture
def expander(kerbol, query):
    return TemplateExpander(kerbol, query)


def test_level_expansion_produces_one_record_per_level(expander, level_template):
    records = list(expander.expand_levels(level_template))

    assert [r.node.get_value("name") for r in records] == ["Outreach1", "Outreach2", "Outreach3"]
    assert [r.unique_name for r in records] == ["Outreach0", "Outreach1", "Outreach2"]
    assert [r.selector for r in records] == ["1", "2", "3"]
    assert all(r.node.name == "STRATEGY" for r in records)


def test_level_suffixes(expander, level_template):
    node = expander.expand(level_template, 2).node

    assert node.get_value("title") == "Public Outreach II"
    assert node.get_value("groupTag") == "OutreachII"
    assert node.get_value("icon") == "Strategia/icons/Outreach2"
    assert node.get_value("desc") == "Make Kerbin care."


def test_level_overrides_and_reputation(expander, level_template):
    first = expander.expand(level_template, 1).node
    second = expander.expand(level_template, 2).node

    assert first.get_values("requiredReputation") == ["0"]
    assert first.get_value("requiredReputationMin") == "0"
    assert second.get_values("requiredReputation") == ["100"]
    assert second.get_value("requiredReputationMin") == "100"
    assert second.get_value("requiredReputationMax") == "100"


def test_level_effects(expander, level_template):
    first = expander.expand(level_template, 1).node
    second = expander.expand(level_template, 2).node
    third = expander.expand(level_template, 3).node

    assert [e.get_value("name") for e in first.get_nodes("EFFECT")] == ["CurrencyOperation"]
    assert first.get_node("EFFECT").get_value("multiplier") == "1.1"
    assert second.get_node("EFFECT").get_value("multiplier") == "1.2"
    assert third.get_node("EFFECT").get_value("multiplier") == "1.1"
    assert [e.get_value("name") for e in third.get_nodes("EFFECT")] == [
        "CurrencyOperation",
        "AdvancedOutreach",
    ]


@pytest.mark.parametrize("level", [0, 4])
def test_levels_out_of_range(expander, level_template, level):
    assert expander.expand(level_template, level) is None


def test_level_bounds_limit_iteration(expander, level_template):
    level_template.set_value("factorSliderSteps", "5")
    level_template.set_value("minLevel", "2")
    level_template.set_value("maxLevel", "4")

    records = list(expander.expand_levels(level_template))

    assert [r.selector for r in records] == ["2", "3", "4"]


def test_counters_belong_to_the_expander(kerbol, query, level_template):
    first = TemplateExpander(kerbol, query)
    list(first.expand_levels(level_template))
    again = [r.unique_name for r in first.expand_levels(level_template)]
    fresh = [r.unique_name for r in TemplateExpander(kerbol, query).expand_levels(level_template)]

    assert again == ["Outreach3", "Outreach4", "Outreach5"]
    assert fresh == ["Outreach0", "Outreach1", "Outreach2"]


def test_body_expansion(expander):
    records = list(expander.expand_bodies(body_template(MOON_TEMPLATE)))

    assert [r.selector for r in records] == ["Mun", "Minmus"]
    assert [r.unique_name for r in records] == ["MoonProgram0", "MoonProgram1"]

    mun = records[0].node
    assert mun.name == "STRATEGY"
    assert mun.get_value("name") == "MoonProgram0"
    assert mun.get_value("title") == "the Mun Program"
    assert mun.get_value("desc") == "Orbit Mun, Kerbin's moon"
    assert mun.get_node("EFFECT").get_value("body") == "Mun"
    assert not mun.has_node("title")


def test_body_override(expander):
    records = list(expander.expand_bodies(body_template(MOON_TEMPLATE)))

    assert records[1].node.get_value("title") == "Minty Program"


def test_sigma_binary_override_uses_primary(sigma, query):
    template = body_template(
        """
        STRATEGY_BODY_EXPAND
        {
            id = PlanetaryProgram
            name = Planets
            title = Visit $body
            title
            {
                Prime = Visit the Prime pair
            }
        }
        """
    )
    records = list(TemplateExpander(sigma, query).expand_bodies(template))

    assert [r.selector for r in records] == ["P"]
    assert records[0].node.get_value("title") == "Visit the Prime pair"


def test_list_macros(binary, query):
    expander = TemplateExpander(binary, query)
    b = binary.get("B")

    assert expander.expand_list("@bodies", b) == ["C", "A1", "C1"]
    assert expander.expand_list("@primarySecondary", b) == ["A", "C"]
    assert expander.expand_list("@solidMoons", b) == ["B", "A", "C", "A1", "C1"]
    assert expander.expand_list("@primarySecondary", binary.get("Home")) == ["Home"]
    with pytest.raises(ExpansionError, match="Unhandled tag: @nope"):
        expander.expand_list("@nope", b)


def test_list_macro_expands_to_repeated_values(expander):
    template = body_template(
        """
        STRATEGY_BODY_EXPAND
        {
            id = GasGiantProgram
            name = GasGiants
            title = $theBody
            EFFECT
            {
                name = LandedBodyRequirement
                body = @solidMoons
            }
        }
        """
    )
    records = list(expander.expand_bodies(template))

    assert [r.selector for r in records] == ["Jool"]
    assert records[0].node.get_node("EFFECT").get_values("body") == ["Laythe", "Vall"]


def test_unknown_macro_fails_only_that_body(expander):
    template = body_template(
        """
        STRATEGY_BODY_EXPAND
        {
            id = MoonProgram
            name = Broken
            title = $body
            target = @nope
            target
            {
                Minmus = Minmus
            }
        }
        """
    )
    records = list(expander.expand_bodies(template))

    assert [r.selector for r in records] == ["Minmus"]
    assert [r.unique_name for r in records] == ["Broken0"]
    assert len(expander.failures) == 1
    failure = expander.failures[0]
    assert (failure.template, failure.selector) == ("Broken", "Mun")
    assert "Unhandled tag: @nope" in failure.error


def test_malformed_slider_steps(expander, level_template):
    level_template.set_value("factorSliderSteps", "three")

    assert list(expander.expand_levels(level_template)) == []
    assert expander.failures[0].selector == "factorSliderSteps"


def test_malformed_min_level_fails_each_level(expander, level_template):
    level_template.set_value("minLevel", "x")

    assert list(expander.expand_levels(level_template)) == []
    assert [f.selector for f in expander.failures] == ["1", "2", "3"]


def test_template_without_name(expander):
    template = body_template("STRATEGY_BODY_EXPAND\n{\n    id = KerbinProgram\n}\n")

    assert list(expander.expand_bodies(template)) == []
    assert expander.failures[0].selector == "Kerbin"


def test_expand_all_orders_body_templates_first(expander, level_template):
    document = parse_config(MOON_TEMPLATE)
    document.add_node(level_template)
    document.nodes.reverse()

    templates = [r.template for r in expander.expand_all(document)]

    assert templates == ["MoonProgram", "MoonProgram", "Outreach", "Outreach", "Outreach"]


def test_default_query_follows_plugin_manifest(star_factory, body_factory):
    sun = star_factory("Sun")
    sun.add_child(body_factory("Kerbin", mass=5.3e22, radius=600000, is_home=True))
    ghost = sun.add_child(
        body_factory("Ghost", mass=4.5e21, radius=320000, metadata={"hiddenRnD": "hidden"})
    )
    expander = TemplateExpander(BodyGraph([sun], plugins={"CustomBarnKit": "1.0.0"}))

    assert expander.query.kind(ghost) is BodyKind.TERRESTRIAL
    assert expander.resolver.query is expander.query
