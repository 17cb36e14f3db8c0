"""
Template expansion into concrete strategy records.

Two kinds of template are supported:

- STRATEGY_BODY_EXPAND: one record per body selected by the template's program
  id. Field values can be overridden per body, can use "$token" placeholders,
  and can be "@macro" lists expanding to several values.
- STRATEGY_LEVEL_EXPAND: one record per difficulty level. Field values can be
  overridden per level, and the level is appended to the name, title, group
  tag and icon.

Every record gets a unique name made from its template name and a counter
owned by the expander, so a fresh expander starts counting from zero.
"""

import logging
from typing import Dict, Iterator, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from .bodies import BodyGraph, CelestialBody
from .confignode import ConfigNode
from .formatting import BodyStringFormatter, format_string, integer_to_roman
from .hierarchy import HierarchyQuery
from .models import ExpansionFailure
from .programs import ProgramResolver

logger = logging.getLogger(__name__)

BODY_EXPAND = "STRATEGY_BODY_EXPAND"
LEVEL_EXPAND = "STRATEGY_LEVEL_EXPAND"
OUTPUT_NODE = "STRATEGY"
EFFECT_NODE = "EFFECT"


class ExpansionError(ValueError):
    """A template cannot be expanded for one body or level."""


class ExpandedRecord(BaseModel):
    """
    One expanded record.

    In body mode the node's name is the unique name. In level mode the node
    keeps its level-suffixed name (Outreach1 for level 1) while unique_name
    comes from the template counter (Outreach0 for the first level), so the
    two differ.

    Attributes:
        unique_name: Generated name, unique within the expansion run
        node: The STRATEGY node with its EFFECT children
        template: Name of the template it came from
        selector: Body name or level that produced it
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    unique_name: str
    node: ConfigNode
    template: str
    selector: str


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


class TemplateExpander:
    """
    Expands templates per body or per level.

    Args:
        graph: Body graph the templates are expanded against
        query: Hierarchy queries (defaults to HierarchyQuery.for_graph(graph))
        resolver: Program resolver (defaults to one sharing query)
        home: Home body (defaults to the graph's home)
    """

    def __init__(
        self,
        graph: BodyGraph,
        query: HierarchyQuery = None,
        resolver: ProgramResolver = None,
        home: CelestialBody = None,
    ):
        self.graph = graph
        self.query = query or HierarchyQuery.for_graph(graph)
        self.resolver = resolver or ProgramResolver(graph, self.query)
        self._home = home
        self._names: Dict[str, int] = {}
        self.failures: List[ExpansionFailure] = []

    @property
    def home(self) -> CelestialBody:
        if self._home is None:
            self._home = self.graph.home
        return self._home

    def next_unique_name(self, name: str) -> str:
        """Append this template name's next counter value, starting at 0."""
        current = self._names.get(name, 0)
        self._names[name] = current + 1
        return f"{name}{current}"

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def expand(
        self, template: ConfigNode, selector: Union[CelestialBody, int]
    ) -> Optional[ExpandedRecord]:
        """
        Expand a template for one body or one level.

        Args:
            template: STRATEGY_BODY_EXPAND or STRATEGY_LEVEL_EXPAND node
            selector: A body (per-body mode) or a level (per-level mode)

        Returns:
            The expanded record, or None if the level is out of range

        Raises:
            ExpansionError: On an unknown list macro or a template without a name
            ValueError: On a malformed numeric field
        """
        if isinstance(selector, int):
            return self._expand_level(template, selector)
        return self._expand_body(template, selector)

    def _template_name(self, template: ConfigNode) -> str:
        name = template.get_value("name")
        if not name:
            raise ExpansionError(f"{template.name} has no name")
        return name

    def _expand_body(self, template: ConfigNode, body: CelestialBody) -> ExpandedRecord:
        name = self._template_name(template)
        node = self.expand_node(template, body)
        node.name = OUTPUT_NODE

        effects = [self.expand_node(effect, body) for effect in template.get_nodes(EFFECT_NODE)]
        for effect in effects:
            node.add_node(effect)

        unique_name = self.next_unique_name(name)
        node.set_value("name", unique_name)
        return ExpandedRecord(unique_name=unique_name, node=node, template=name, selector=body.name)

    def _expand_level(self, template: ConfigNode, level: int) -> Optional[ExpandedRecord]:
        name = self._template_name(template)
        node = self.expand_node(template, level)
        if node is None:
            return None
        node.name = OUTPUT_NODE

        roman = integer_to_roman(level)
        node.set_value("name", f"{node.get_value('name')}{level}")
        if node.has_value("title"):
            node.set_value("title", f"{node.get_value('title')} {roman}")
        if node.has_value("groupTag"):
            node.set_value("groupTag", f"{node.get_value('groupTag')}{roman}")
        if node.has_value("icon"):
            node.set_value("icon", f"{node.get_value('icon')}{level}")

        if node.has_value("requiredReputation"):
            reputation = _format_number(node.parse_float("requiredReputation"))
            node.set_value("requiredReputationMin", reputation)
            node.set_value("requiredReputationMax", reputation)

        for effect in template.get_nodes(EFFECT_NODE):
            expanded = self.expand_node(effect, level)
            if expanded is not None:
                node.add_node(expanded)

        return ExpandedRecord(
            unique_name=self.next_unique_name(name), node=node, template=name, selector=str(level)
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def expand_node(
        self, node: ConfigNode, selector: Union[CelestialBody, int]
    ) -> Optional[ConfigNode]:
        """
        Expand the values of a single node (a template or one of its effects).

        Child nodes are not copied: override nodes are consumed here and
        EFFECT nodes are expanded separately by the caller.
        """
        if isinstance(selector, int):
            return self._expand_node_for_level(node, selector)
        return self._expand_node_for_body(node, selector)

    def _expand_node_for_body(self, node: ConfigNode, body: CelestialBody) -> ConfigNode:
        display = self.query.display_body(body)
        formatter = BodyStringFormatter(self.query, body, self.home)
        new_node = ConfigNode(node.name)

        for key, value in node.values:
            override = node.get_node(key)
            if override is not None:
                value = override.get_value(display.name, value)

            if value.startswith("@"):
                for item in self.expand_list(value, body):
                    new_node.add_value(key, item)
            else:
                new_node.add_value(key, formatter.format(value))

        return new_node

    def _expand_node_for_level(self, node: ConfigNode, level: int) -> Optional[ConfigNode]:
        min_level = node.parse_int("minLevel", 1)
        max_level = node.parse_int("maxLevel", 3)
        if level < min_level or level > max_level:
            return None

        new_node = ConfigNode(node.name)
        for key, value in node.values:
            new_node.add_value(key, format_string(value, self.home))

        key = str(level)
        for override in node.nodes:
            if override.name == EFFECT_NODE:
                continue
            value = override.get_value(key)
            if value is not None:
                new_node.remove_value(override.name)
                new_node.add_value(override.name, format_string(value, self.home))

        return new_node

    def expand_list(self, macro: str, body: CelestialBody) -> List[str]:
        """
        Expand an "@" list macro to body names.

        Args:
            macro: "@bodies", "@primarySecondary" or "@solidMoons"
            body: Target body

        Raises:
            ExpansionError: If the macro is unknown
        """
        if macro == "@bodies":
            bodies = self.query.bodies_under_node(body)
        elif macro == "@primarySecondary":
            bodies = self.query.primary_and_secondary(body)
        elif macro == "@solidMoons":
            bodies = self.query.bodies_under_node(
                body, solids_only=True, include_barycenter=True, include_primary=True
            )
        else:
            raise ExpansionError(f"Unhandled tag: {macro}")
        return [b.name for b in bodies]

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def _record_failure(self, template: str, selector: str, error: Exception) -> None:
        self.failures.append(
            ExpansionFailure(template=template, selector=selector, error=str(error))
        )

    def expand_bodies(self, template: ConfigNode) -> Iterator[ExpandedRecord]:
        """
        Expand a STRATEGY_BODY_EXPAND template for every body of its program.

        A body that fails to expand is logged and recorded in self.failures;
        expansion continues with the next body.
        """
        program_id = template.get_value("id", "")
        template_name = template.get_value("name", program_id)
        logger.info(f"Expanding {program_id}")

        for body in self.resolver.resolve(program_id, self.home):
            try:
                record = self.expand(template, body)
            except ValueError as e:
                logger.error(f"Failed to generate strategy for body '{body.name}': {e}")
                self._record_failure(template_name, body.name, e)
                continue

            logger.info(f"Generated strategy '{record.node.get_value('title')}'")
            yield record

    def expand_levels(self, template: ConfigNode) -> Iterator[ExpandedRecord]:
        """
        Expand a STRATEGY_LEVEL_EXPAND template for levels 1..factorSliderSteps.

        Levels outside the template's minLevel/maxLevel produce nothing. A
        level that fails to expand is logged and recorded in self.failures.
        """
        template_name = template.get_value("name", "")
        logger.info(f"Expanding {template_name}")

        try:
            count = template.parse_int("factorSliderSteps")
        except ValueError as e:
            logger.error(f"Failed to expand '{template_name}': {e}")
            self._record_failure(template_name, "factorSliderSteps", e)
            return

        for level in range(1, count + 1):
            try:
                record = self.expand(template, level)
            except ValueError as e:
                logger.error(f"Failed to generate strategy for level {level}: {e}")
                self._record_failure(template_name, str(level), e)
                continue

            if record is None:
                continue
            logger.info(f"Generated strategy '{record.node.get_value('title')}'")
            yield record

    def expand_all(self, document: ConfigNode) -> Iterator[ExpandedRecord]:
        """Expand every body template, then every level template, in a document."""
        for template in document.get_nodes(BODY_EXPAND):
            yield from self.expand_bodies(template)
        for template in document.get_nodes(LEVEL_EXPAND):
            yield from self.expand_levels(template)
