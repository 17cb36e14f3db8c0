"""
Expansion orchestration system.

Runs every template of a document set, handling the required-plugin check,
timing tracking and failure collection.
"""

from .orchestrator import ExpansionOrchestrator, collect_templates, template_label

__all__ = [
    "ExpansionOrchestrator",
    "collect_templates",
    "template_label",
]
