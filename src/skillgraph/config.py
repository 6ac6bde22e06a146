"""skillgraph configuration management."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from skillgraph.core.decay import RUSTY_AFTER, VERY_RUSTY_AFTER
from skillgraph.core.display import DEFAULT_FORMAT
from skillgraph.core.exporter import DotStyle
from skillgraph.core.levels import DEFAULT_LEVELS, LevelTable

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """skillgraph configuration."""

    home_path: Path = field(default_factory=lambda: Path.home() / ".skillgraph")
    log_level: str = "INFO"
    wal_mode: bool = True

    # Refresh cadence (seconds)
    refresh_interval: float = 60.0

    # Rustiness thresholds (seconds since the last award)
    rusty_after: float = float(RUSTY_AFTER)
    very_rusty_after: float = float(VERY_RUSTY_AFTER)

    # Awards
    default_award: int = 10
    random_delta: int = 5

    levels: list = field(default_factory=DEFAULT_LEVELS.to_pairs)
    focus_skills: list = field(default_factory=list)
    display_format: str = DEFAULT_FORMAT

    # Export
    excluded_levels: list = field(default_factory=list)
    node_shape: str = "box"
    rustiness_colors: dict = field(default_factory=lambda: DotStyle().fill_colors)
    font_colors: dict = field(default_factory=lambda: DotStyle().font_colors)

    @classmethod
    def load(cls, home_path: Path | None = None) -> Config:
        """Load config from YAML file, env vars, then defaults."""
        config = cls()

        if home_path:
            config.home_path = home_path

        # Override from env
        env_path = os.environ.get("SKILLGRAPH_HOME")
        if env_path:
            config.home_path = Path(env_path)

        env_log = os.environ.get("SKILLGRAPH_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        config_file = config.home_path / "config.yaml"
        if config_file.exists():
            with open(config_file) as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ValueError(f"{config_file} is not valid YAML: {e}") from e
            if not isinstance(data, dict):
                raise ValueError(f"{config_file} must hold a mapping")
            for key, value in data.items():
                if key == "home_path" or not hasattr(config, key):
                    logger.warning("Ignoring unknown config key: %s", key)
                    continue
                expected_type = type(getattr(config, key))
                if expected_type in (list, dict) and not isinstance(value, expected_type):
                    raise ValueError(
                        f"{key} must be a {expected_type.__name__}, got {type(value).__name__}"
                    )
                try:
                    setattr(config, key, expected_type(value))
                except (TypeError, ValueError) as e:
                    raise ValueError(f"invalid value for {key}: {value!r}") from e

        config.validate()
        return config

    def validate(self) -> None:
        """Check invariants; raises ValueError for a broken level table."""
        LevelTable.from_pairs(self.levels)
        if self.very_rusty_after <= self.rusty_after:
            logger.warning(
                "very_rusty_after (%s) should exceed rusty_after (%s)",
                self.very_rusty_after,
                self.rusty_after,
            )

    @property
    def db_path(self) -> Path:
        return self.home_path / "skills.db"

    @property
    def level_table(self) -> LevelTable:
        return LevelTable.from_pairs(self.levels)

    @property
    def dot_style(self) -> DotStyle:
        return DotStyle(
            node_shape=self.node_shape,
            fill_colors=dict(self.rustiness_colors),
            font_colors=dict(self.font_colors),
        )

    def save(self) -> None:
        """Save current config to YAML."""
        self.home_path.mkdir(parents=True, exist_ok=True)
        config_file = self.home_path / "config.yaml"
        data = {
            "log_level": self.log_level,
            "wal_mode": self.wal_mode,
            "refresh_interval": self.refresh_interval,
            "rusty_after": self.rusty_after,
            "very_rusty_after": self.very_rusty_after,
            "default_award": self.default_award,
            "random_delta": self.random_delta,
            "levels": self.levels,
            "focus_skills": self.focus_skills,
            "display_format": self.display_format,
            "excluded_levels": self.excluded_levels,
            "node_shape": self.node_shape,
            "rustiness_colors": self.rustiness_colors,
            "font_colors": self.font_colors,
        }
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
