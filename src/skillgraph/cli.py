"""CLI: init, award, status, show, export, watch, serve."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from skillgraph.config import Config
from skillgraph.core.aggregator import total_experience
from skillgraph.core.decay import rustiness
from skillgraph.core.engine import SkillEngine
from skillgraph.core.exporter import to_dot, to_node_link
from skillgraph.core.ticker import RefreshTicker
from skillgraph.events.bus import EventBus
from skillgraph.events.types import EventType
from skillgraph.models.skill import Dependency
from skillgraph.storage.sqlite_store import SQLiteStore

T = TypeVar("T")

_RUST_STYLES = {"fresh": "green", "rusty": "yellow", "very_rusty": "red"}


def _run(
    config: Config,
    action: Callable[[SkillEngine], Awaitable[T]],
    bus: EventBus | None = None,
) -> T:
    """Open the store, load the graph, run ``action`` and close the store."""

    async def _session() -> T:
        store = SQLiteStore(config.db_path, wal_mode=config.wal_mode)
        await store.initialize()
        try:
            engine = SkillEngine(store, bus or EventBus(), config)
            await engine.load()
            return await action(engine)
        finally:
            await store.close()

    return asyncio.run(_session())


def _parse_dependency(value: str) -> Dependency:
    try:
        return Dependency.from_text(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.version_option(package_name="skillgraph")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Data directory (default: ~/.skillgraph or $SKILLGRAPH_HOME)",
)
@click.pass_context
def main(ctx: click.Context, home: Path | None) -> None:
    """skillgraph: level up the skills you practice."""
    try:
        config = Config.load(home.expanduser().resolve() if home else None)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


@main.command()
@click.pass_obj
def init(config: Config) -> None:
    """Initialize a skillgraph data directory."""

    async def _init() -> None:
        store = SQLiteStore(config.db_path, wal_mode=config.wal_mode)
        await store.initialize()
        await store.close()

    asyncio.run(_init())
    config.save()
    click.echo(f"Initialized skillgraph at {config.home_path}")
    click.echo(f"Database: {config.db_path}")


@main.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--exp", "base_exp", type=click.IntRange(min=0), default=None, help="Base award")
@click.option("--random", "randomize", is_flag=True, help="Randomize the award amount")
@click.option("--offset", type=int, default=0, help="Days early (+) or overdue (-)")
@click.option(
    "--depends",
    multiple=True,
    help="Dependency NAME[:WEIGHT] for newly created skills (repeatable)",
)
@click.pass_obj
def award(
    config: Config,
    names: tuple[str, ...],
    base_exp: int | None,
    randomize: bool,
    offset: int,
    depends: tuple[str, ...],
) -> None:
    """Award experience to one or more skills."""
    deps = [_parse_dependency(d) for d in depends]
    level_ups: list[dict[str, Any]] = []

    async def _on_level_up(event_type: EventType, data: dict[str, Any]) -> None:
        level_ups.append(data)

    bus = EventBus()
    bus.on(EventType.SKILL_LEVEL_UP, _on_level_up)

    async def _award(engine: SkillEngine) -> tuple[list, str]:
        amount = engine.random_award_amount() if randomize else base_exp
        dependencies = {name.strip(): deps for name in names} if deps else None
        results = await engine.award(
            names, amount, deadline_offset_days=offset, dependencies=dependencies
        )
        return results, engine.refresh()

    results, status_line = _run(config, _award, bus)

    console = Console()
    failed = False
    for result in results:
        if not result.ok:
            failed = True
            console.print(f"[red]✗[/red] {result.skill_name}: {result.error}")
            continue
        verb = "Created" if result.created else "Awarded"
        console.print(f"[green]✓[/green] {verb} {result.skill_name}: +{result.exp_awarded} exp")
    for event in level_ups:
        console.print(
            Panel(
                f"[bold]{event['skill']}[/bold] reached [cyan]{event['level']}[/cyan]",
                title="Level up!",
            )
        )
    console.print(status_line)
    if failed:
        sys.exit(1)


@main.command()
@click.pass_obj
def status(config: Config) -> None:
    """Show every skill with its level and rustiness."""

    async def _status(engine: SkillEngine) -> SkillEngine:
        return engine

    engine = _run(config, _status)

    now = time.time()
    table = Table(title="Skills")
    table.add_column("Skill", style="cyan")
    table.add_column("Exp", justify="right")
    table.add_column("Total", justify="right", style="magenta")
    table.add_column("Level")
    table.add_column("Progress", justify="right")
    table.add_column("State")

    for skill in engine.graph:
        total = total_experience(engine.graph, skill.name)
        current, _ = engine.levels.level_for(total)
        state = rustiness(
            skill.last_modified, now, config.rusty_after, config.very_rusty_after
        ).value
        table.add_row(
            skill.name,
            str(skill.experience),
            str(total),
            current.name,
            f"{engine.levels.percentage_within_level(total):.0f}%",
            f"[{_RUST_STYLES[state]}]{state}[/{_RUST_STYLES[state]}]",
        )

    console = Console()
    console.print(table)
    console.print(engine.refresh())


@main.command()
@click.argument("name")
@click.pass_obj
def show(config: Config, name: str) -> None:
    """Show one skill as JSON."""

    async def _show(engine: SkillEngine) -> dict | None:
        return engine.skill_info(name)

    info = _run(config, _show)
    if info is None:
        click.echo(f"Error: Skill not found: {name}", err=True)
        sys.exit(1)
    click.echo(json.dumps(info, indent=2))


@main.command()
@click.option("--format", "fmt", type=click.Choice(["dot", "json"]), default="dot")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
def export(config: Config, fmt: str, output: Path | None) -> None:
    """Export the skill graph for an external layout tool."""

    async def _export(engine: SkillEngine) -> str:
        snapshot = engine.snapshot()
        if fmt == "dot":
            return to_dot(snapshot, config.dot_style)
        return json.dumps(to_node_link(snapshot), indent=2)

    text = _run(config, _export)
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    click.echo(f"Wrote {fmt} export to {output}")


@main.command()
@click.option("--interval", type=float, default=None, help="Seconds between refreshes")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Stop after N refreshes")
@click.pass_obj
def watch(config: Config, interval: float | None, count: int | None) -> None:
    """Print the status line periodically."""

    async def _watch(engine: SkillEngine) -> None:
        done = asyncio.Event()
        printed = 0

        def _tick() -> None:
            nonlocal printed
            click.echo(engine.refresh())
            printed += 1
            if count is not None and printed >= count:
                done.set()

        ticker = RefreshTicker(_tick, interval or config.refresh_interval)
        ticker.start()
        try:
            await done.wait()
        finally:
            await ticker.stop()

    try:
        _run(config, _watch)
    except KeyboardInterrupt:
        pass


@main.command()
@click.option("--transport", type=click.Choice(["stdio"]), default="stdio")
@click.pass_obj
def serve(config: Config, transport: str) -> None:
    """Start the MCP server."""
    from skillgraph.server import create_server

    server = create_server(str(config.db_path), config)
    server.run(transport=transport)  # type: ignore[arg-type]
