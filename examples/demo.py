"""Demo: award skills, watch experience flow through dependencies, export the graph.

Builds a small skill graph in a temporary directory, applies a few awards
(early, on time and overdue), then prints levels, the status line and the
DOT export.
"""

import asyncio
import json
import tempfile
import time
from pathlib import Path

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from skillgraph.config import Config
from skillgraph.core.aggregator import total_experience
from skillgraph.core.decay import DAY
from skillgraph.core.engine import SkillEngine
from skillgraph.core.exporter import to_dot, to_node_link
from skillgraph.events.bus import EventBus
from skillgraph.events.types import EventType
from skillgraph.storage.sqlite_store import SQLiteStore

console = Console()


def step_header(num: int, title: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold cyan]Step {num}:[/bold cyan] [yellow]{title}[/yellow]",
            border_style="cyan",
        )
    )


async def demo() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        config = Config(home_path=Path(tmp))
        config.levels = [[0, "Dabbling"], [50, "Novice"], [150, "Apprentice"]]
        config.focus_skills = ["python", "writing"]

        store = SQLiteStore(config.db_path)
        await store.initialize()
        bus = EventBus()

        async def on_level_up(event_type: EventType, data: dict) -> None:
            console.print(f"  [bold green]★ {data['skill']} reached {data['level']}[/bold green]")

        bus.on(EventType.SKILL_LEVEL_UP, on_level_up)
        engine = SkillEngine(store, bus, config)
        await engine.load()

        now = time.time()

        step_header(1, "Create skills with dependencies")
        await engine.award(["programming"], 40, now=now - 40 * DAY)
        await engine.award(
            ["python"],
            20,
            now=now,
            dependencies={"python": [["programming", 0.5], "typing"]},
        )
        await engine.award(["typing"], 10, now=now - 10 * DAY)
        await engine.award(["writing"], 30, now=now)

        step_header(2, "Awards relative to a deadline")
        [early] = await engine.award(["python"], 10, deadline_offset_days=3, now=now)
        [late] = await engine.award(["writing"], 10, deadline_offset_days=-20, now=now)
        console.print(f"  3 days early: +{early.exp_awarded}, 20 days overdue: +{late.exp_awarded}")

        step_header(3, "Levels and rustiness")
        table = Table()
        table.add_column("Skill", style="cyan")
        table.add_column("Raw", justify="right")
        table.add_column("Total", justify="right", style="magenta")
        table.add_column("Level")
        table.add_column("State")
        for skill in engine.graph:
            info = engine.skill_info(skill.name, now=now)
            table.add_row(
                skill.name,
                str(skill.experience),
                str(total_experience(engine.graph, skill.name)),
                info["level"],
                info["rustiness"],
            )
        console.print(table)
        console.print(f"  Status line: [bold]{engine.refresh()}[/bold]")

        step_header(4, "Export for Graphviz")
        snapshot = engine.snapshot(now=now)
        console.print(Panel(JSON(json.dumps(to_node_link(snapshot))), border_style="green"))
        console.print(to_dot(snapshot, config.dot_style))

        await store.close()


if __name__ == "__main__":
    asyncio.run(demo())
