"""skillgraph: skill experience tracking over a weighted dependency graph."""

__version__ = "0.1.0"
