"""skillgraph data models."""

from skillgraph.models.award import AwardResult
from skillgraph.models.skill import Dependency, Skill
from skillgraph.models.snapshot import EdgeDescriptor, GraphDescription, NodeDescriptor

__all__ = [
    "AwardResult",
    "Dependency",
    "EdgeDescriptor",
    "GraphDescription",
    "NodeDescriptor",
    "Skill",
]
