"""Skill and dependency models."""

from __future__ import annotations

import math
import time
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Dependency(BaseModel):
    """A weighted reference from one skill to another."""

    name: str = Field(min_length=1)
    weight: float = Field(default=1.0, gt=0, allow_inf_nan=False)

    @classmethod
    def parse(cls, raw: Any) -> Dependency:
        """Normalize a bare name, a ``[name, weight]`` pair or a mapping."""
        if isinstance(raw, Dependency):
            return raw
        if isinstance(raw, str):
            return cls(name=raw.strip())
        if isinstance(raw, (list, tuple)) and len(raw) == 2 and isinstance(raw[0], str):
            return cls(name=raw[0].strip(), weight=raw[1])
        if isinstance(raw, dict):
            return cls.model_validate(raw)
        raise ValueError(f"Malformed dependency: {raw!r}")

    @classmethod
    def from_text(cls, text: str) -> Dependency:
        """Parse ``NAME`` or ``NAME:WEIGHT`` as typed on a command line.

        Raises:
            ValueError: If the name is empty or the weight is not a positive,
                finite number
        """
        name, sep, weight = text.partition(":")
        if not name.strip():
            raise ValueError(f"missing skill name in {text!r}")
        if not sep:
            return cls(name=name.strip())
        try:
            value = float(weight)
        except ValueError as e:
            raise ValueError(f"invalid weight in {text!r}") from e
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"invalid weight in {text!r}")
        return cls(name=name.strip(), weight=value)

    def to_storage(self) -> str | list:
        if self.weight == 1.0:
            return self.name
        return [self.name, self.weight]


class Skill(BaseModel):
    """A named skill holding raw experience and its dependencies."""

    name: str = Field(min_length=1)
    experience: int = Field(default=0, ge=0)
    last_modified: float = Field(default_factory=time.time)
    dependencies: list[Dependency] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("dependencies", mode="before")
    @classmethod
    def _normalize_dependencies(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("dependencies must be a list")
        return [Dependency.parse(item) for item in value]

    def dependency_names(self) -> list[str]:
        return [dep.name for dep in self.dependencies]

    def to_storage(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "experience": self.experience,
            "last_modified": self.last_modified,
            "dependencies": [dep.to_storage() for dep in self.dependencies],
        }
