"""Award result model."""

from __future__ import annotations

from pydantic import BaseModel


class AwardResult(BaseModel):
    """Outcome of applying an award to a single skill."""

    skill_name: str
    exp_awarded: int = 0
    new_level: str | None = None
    created: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_response(self) -> dict:
        data = {
            "_v": "1.0",
            "skill": self.skill_name,
            "exp_awarded": self.exp_awarded,
            "new_level": self.new_level,
            "created": self.created,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
