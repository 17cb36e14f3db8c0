"""
Data models for body-graph documents, progress tracking and expansion reports.

This module defines the pydantic structures used to validate input documents
and to describe the results of an expansion run.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class BodyConfig(BaseModel):
    """
    Configuration for a single body in the body graph.

    Attributes:
        name: Unique body identifier
        display_name: Human-facing name (may carry a grammar suffix such as "^N")
        mass: Body mass
        radius: Body radius in meters
        solid: Whether the body has a solid surface
        star: Whether the body is a star
        home: Whether the body is the home world
        metadata: Free-form host metadata read by capability providers
        children: Bodies orbiting this one, in host order
    """

    name: str
    display_name: Optional[str] = None
    mass: float
    radius: float
    solid: bool = False
    star: bool = False
    home: bool = False
    metadata: Dict[str, Any] = {}
    children: List["BodyConfig"] = []


class SystemConfig(BaseModel):
    """
    A complete body-graph document.

    Attributes:
        roots: Top-level bodies (the first one is the sun-equivalent)
        plugins: Installed host plugins mapped to their version strings, or None
            to assume every optional provider is available
    """

    roots: List[BodyConfig]
    plugins: Optional[Dict[str, str]] = None

    @model_validator(mode="before")
    @classmethod
    def _single_root(cls, data: Any) -> Any:
        # Accept {"root": {...}} as shorthand for a one-element forest
        if isinstance(data, dict) and "root" in data and "roots" not in data:
            data = dict(data)
            data["roots"] = [data.pop("root")]
        return data


class Milestone(BaseModel):
    """Progress state of one milestone (orbit, landing, ...) for a body."""

    reached: bool = False
    complete_manned: bool = False


class ProgressNode(BaseModel):
    """
    Progress recorded against a single body.

    Attributes:
        body: Name of the body this progress refers to
        reached: Whether the body has been reached at all
        orbit: Orbit milestone
        landing: Landing milestone
        return_from_orbit: Return-from-orbit milestone
        return_from_surface: Return-from-surface milestone
        fly_by: Fly-by milestone
        crew_landed: Whether any crew member's log records a landing on the body
    """

    body: str
    reached: bool = False
    orbit: Milestone = Field(default_factory=Milestone)
    landing: Milestone = Field(default_factory=Milestone)
    return_from_orbit: Milestone = Field(default_factory=Milestone)
    return_from_surface: Milestone = Field(default_factory=Milestone)
    fly_by: Milestone = Field(default_factory=Milestone)
    crew_landed: bool = False


class ExpansionFailure(BaseModel):
    """
    A single record that could not be expanded.

    Attributes:
        template: Name or id of the template being expanded
        selector: Body name or level that failed
        error: Error message
    """

    template: str
    selector: str
    error: str


class ExpansionReport(BaseModel):
    """
    Summary of one expansion run.

    Attributes:
        records: Number of records emitted
        failures: Records that failed to expand
        timings: Seconds spent per template
        disabled_reason: Set when a required plugin is missing and nothing was expanded
    """

    records: int = 0
    failures: List[ExpansionFailure] = []
    timings: Dict[str, float] = {}
    disabled_reason: Optional[str] = None
