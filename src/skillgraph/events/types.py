"""Event type constants for skillgraph."""

from enum import StrEnum


class EventType(StrEnum):
    SKILL_CREATED = "skill.created"
    SKILL_AWARDED = "skill.awarded"
    SKILL_LEVEL_UP = "skill.level_up"

    AWARD_FAILED = "award.failed"

    GRAPH_LOADED = "graph.loaded"
    GRAPH_SAVED = "graph.saved"
