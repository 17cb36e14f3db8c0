"""
High-level interface for classification and template expansion.

This module provides a simple API that wires together the body graph, the
capability registry, the classifier, hierarchy queries, program resolution
and template expansion.
"""

import json
from pathlib import Path
from typing import Dict, List, Tuple

from .bodies import CelestialBody, load_body_graph
from .capabilities import create_default_registry
from .classification import BodyKind, Classifier
from .confignode import ConfigNode, load_config_file
from .expander import ExpandedRecord, TemplateExpander
from .hierarchy import HierarchyQuery, format_tree_as_string
from .models import ExpansionReport
from .orchestration import ExpansionOrchestrator
from .programs import ProgramResolver


class ExpansionProcessor:
    """
    Loads a body graph and template files and runs queries and expansions on them.

    Args:
        system_path: Path to the body-graph JSON document
        template_paths: ConfigNode template files to expand
        verbose: Verbosity level passed to the orchestrator
    """

    def __init__(
        self,
        system_path: str | Path,
        template_paths: List[str | Path] = None,
        verbose: int = 0,
    ):
        self.system_path = Path(system_path)
        self.template_paths = [Path(p) for p in template_paths or []]
        self.verbose = verbose

        self.graph = load_body_graph(self.system_path)
        self.registry = create_default_registry(self.graph.plugins)
        self.classifier = Classifier(capabilities=self.registry)
        self.query = HierarchyQuery(self.classifier)
        self.resolver = ProgramResolver(self.graph, self.query)

        self.documents: List[ConfigNode] = [load_config_file(p) for p in self.template_paths]
        self.orchestrator: ExpansionOrchestrator = None

    def classify_bodies(self) -> Dict[str, BodyKind]:
        """Kind of every body in the graph, keyed by name."""
        return {body.name: self.classifier.classify(body) for body in self.graph}

    def format_tree(self) -> str:
        """The body graph as an ASCII tree annotated with kinds."""
        return format_tree_as_string(self.graph, self.classifier)

    def resolve_program(self, program_id: str, home: str = None) -> List[CelestialBody]:
        """
        Resolve a program id against the loaded graph.

        Args:
            program_id: Program identifier
            home: Optional home body name overriding the graph's home

        Raises:
            ValueError: If home names an unknown body
        """
        home_body = None
        if home:
            home_body = self.graph.get(home)
            if home_body is None:
                raise ValueError(f"Unknown body: {home}")
        return self.resolver.resolve(program_id, home_body)

    def expand(self) -> Tuple[List[ExpandedRecord], ExpansionReport]:
        """
        Expand every loaded template with a fresh resolver and expander.

        Name counters and the resolver's log-once diagnostics start over on
        every call.

        Returns:
            (records, report)
        """
        resolver = ProgramResolver(self.graph, self.query)
        expander = TemplateExpander(self.graph, self.query, resolver)
        self.orchestrator = ExpansionOrchestrator(expander, self.registry, verbose=self.verbose)
        records, report = self.orchestrator.execute(self.documents)
        return records, report

    def export_results(
        self,
        records: List[ExpandedRecord],
        output_path: str | Path,
        fmt: str = None,
    ) -> None:
        """
        Export expanded records to a file.

        Args:
            records: Records from expand()
            output_path: Destination file
            fmt: "json" or "cfg"; detected from the file suffix when omitted

        Each cfg record is preceded by a comment holding its unique name.
        """
        output_path = Path(output_path)
        if fmt is None:
            fmt = "cfg" if output_path.suffix.lower() == ".cfg" else "json"

        output_path.parent.mkdir(parents=True, exist_ok=True)
        if fmt == "json":
            output_data = [
                {
                    "unique_name": record.unique_name,
                    "template": record.template,
                    "selector": record.selector,
                    "record": record.node.to_dict(),
                }
                for record in records
            ]
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(output_data, f, indent=2, ensure_ascii=False)
        elif fmt == "cfg":
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(
                    "\n\n".join(f"// {record.unique_name}\n{record.node.to_text()}" for record in records)
                )
                f.write("\n")
        else:
            raise ValueError(f"Unknown format: {fmt}")

    def cleanup(self) -> None:
        """Drop memoized classifications."""
        self.classifier.clear_cache()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures cleanup."""
        self.cleanup()
