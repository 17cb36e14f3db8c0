"""
Body Classification and Strategy Expansion Package
"""

from .bodies import BodyGraph, CelestialBody, load_body_graph, validate_system
from .capabilities import (
    CapabilityProvider,
    CapabilityRegistry,
    KopernicusProvider,
    SingularityProvider,
    WormholeProvider,
    create_default_registry,
)
from .classification import BodyKind, Classifier
from .confignode import ConfigNode, load_config_file, parse_config
from .expander import ExpandedRecord, ExpansionError, TemplateExpander
from .formatting import BodyStringFormatter, integer_to_roman
from .hierarchy import HierarchyQuery, format_tree_as_string
from .models import (
    BodyConfig,
    ExpansionFailure,
    ExpansionReport,
    Milestone,
    ProgressNode,
    SystemConfig,
)
from .orchestration import ExpansionOrchestrator
from .policies import (
    AnyPolicy,
    BodyPolicy,
    CompositePolicy,
    DefaultPolicy,
    KindPolicy,
    SolidSurfacePolicy,
)
from .processor import ExpansionProcessor
from .programs import ProgramId, ProgramResolver
from .requirements import CelestialBodyRequirement, CheckKind

__version__ = "0.1.0"

__all__ = [
    # Models
    "BodyConfig",
    "SystemConfig",
    "Milestone",
    "ProgressNode",
    "ExpansionFailure",
    "ExpansionReport",
    # Bodies
    "CelestialBody",
    "BodyGraph",
    "load_body_graph",
    "validate_system",
    # Capabilities
    "CapabilityProvider",
    "CapabilityRegistry",
    "KopernicusProvider",
    "SingularityProvider",
    "WormholeProvider",
    "create_default_registry",
    # Classification
    "BodyKind",
    "Classifier",
    "HierarchyQuery",
    "format_tree_as_string",
    # Policies
    "BodyPolicy",
    "DefaultPolicy",
    "KindPolicy",
    "SolidSurfacePolicy",
    "CompositePolicy",
    "AnyPolicy",
    # Programs
    "ProgramId",
    "ProgramResolver",
    # Expansion
    "ConfigNode",
    "parse_config",
    "load_config_file",
    "BodyStringFormatter",
    "integer_to_roman",
    "ExpandedRecord",
    "ExpansionError",
    "TemplateExpander",
    "ExpansionOrchestrator",
    "ExpansionProcessor",
    # Requirements
    "CheckKind",
    "CelestialBodyRequirement",
]
