"""Renderable graph snapshot models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NodeDescriptor(BaseModel):
    """One skill as seen by an external layout tool."""

    name: str
    label: str
    level: str
    total_experience: int
    size: float = Field(ge=0.0, le=1.0)
    rustiness: str


class EdgeDescriptor(BaseModel):
    """A dependency edge; the weight is kept as the edge label."""

    source: str
    target: str
    weight: float

    @property
    def label(self) -> str:
        return f"{self.weight:g}"


class GraphDescription(BaseModel):
    """Directed graph of included skills and the edges between them."""

    nodes: list[NodeDescriptor] = Field(default_factory=list)
    edges: list[EdgeDescriptor] = Field(default_factory=list)

    def node(self, name: str) -> NodeDescriptor | None:
        for node in self.nodes:
            if node.name == name:
                return node
        return None
