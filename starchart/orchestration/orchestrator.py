"""
Expansion orchestrator for running every template of a document set.

Handles the required-plugin check, runs body templates before level templates,
tracks timing per template and collects failures into an ExpansionReport.
"""

import time
from typing import Dict, List, Tuple

from rich.console import Console
from tqdm import tqdm

from ..capabilities import CapabilityRegistry
from ..confignode import ConfigNode
from ..expander import BODY_EXPAND, LEVEL_EXPAND, ExpandedRecord, TemplateExpander
from ..models import ExpansionReport

console = Console()


def collect_templates(documents: List[ConfigNode]) -> List[ConfigNode]:
    """All body templates from every document, then all level templates."""
    body = [t for doc in documents for t in doc.get_nodes(BODY_EXPAND)]
    level = [t for doc in documents for t in doc.get_nodes(LEVEL_EXPAND)]
    return body + level


def template_label(template: ConfigNode) -> str:
    """Human-readable label: the program id for body templates, else the name."""
    if template.name == BODY_EXPAND:
        return template.get_value("id") or template.get_value("name", "?")
    return template.get_value("name", "?")


class ExpansionOrchestrator:
    """
    Orchestrates expansion of a set of template documents.

    Args:
        expander: TemplateExpander owning the run's name counters
        registry: Capability registry used for the required-plugin check
        verbose: Verbosity level (0=quiet, 1=info, 2=debug)
    """

    def __init__(self, expander: TemplateExpander, registry: CapabilityRegistry, verbose: int = 0):
        self.expander = expander
        self.registry = registry
        self.verbose = verbose
        self.template_timings: Dict[str, float] = {}

    def execute(self, documents: List[ConfigNode]) -> Tuple[List[ExpandedRecord], ExpansionReport]:
        """
        Expand every template in the documents.

        Args:
            documents: Parsed template documents

        Returns:
            (records, report). When the required plugin is missing no records
            are produced and report.disabled_reason says why.
        """
        self.template_timings = {}

        disabled_reason = self.registry.check_required()
        if disabled_reason:
            return [], ExpansionReport(disabled_reason=disabled_reason)

        templates = collect_templates(documents)
        records: List[ExpandedRecord] = []
        failures_before = len(self.expander.failures)

        with tqdm(
            total=len(templates),
            desc="Templates",
            disable=(self.verbose == 0 or len(templates) <= 1),
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]",
        ) as pbar:
            for template in templates:
                label = template_label(template)
                pbar.set_description(f"Expanding {label}")

                start = time.time()
                if template.name == BODY_EXPAND:
                    produced = list(self.expander.expand_bodies(template))
                else:
                    produced = list(self.expander.expand_levels(template))
                records.extend(produced)

                elapsed = time.time() - start
                self.template_timings[label] = self.template_timings.get(label, 0.0) + elapsed

                if self.verbose > 1:
                    console.print(
                        f"[green]✓ {label}: {len(produced)} record(s) ({elapsed:.2f}s)[/green]"
                    )

                pbar.update(1)

        report = ExpansionReport(
            records=len(records),
            failures=self.expander.failures[failures_before:],
            timings=dict(self.template_timings),
        )
        return records, report

    def format_timing_summary(self) -> str:
        """
        Format timing summary as a readable string.

        Returns:
            Formatted string with timing breakdown and percentages
        """
        if not self.template_timings:
            return "No timing data available"

        lines = []
        total = sum(self.template_timings.values())

        for label, elapsed in sorted(
            self.template_timings.items(), key=lambda x: x[1], reverse=True
        ):
            percentage = (elapsed / total * 100) if total > 0 else 0
            lines.append(f"  • {label}: {elapsed:.2f}s ({percentage:.1f}%)")

        lines.append(f"  • Total: {total:.2f}s")
        return "\n".join(lines)
