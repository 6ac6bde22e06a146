"""Tests for the FastMCP server."""

from __future__ import annotations

import json

import pytest
from fastmcp import Client

from skillgraph.config import Config
from skillgraph.server import create_server


def _data(result) -> dict:
    """Extract parsed JSON from CallToolResult."""
    return json.loads(result.content[0].text)


@pytest.fixture
async def client(tmp_path):
    config = Config(home_path=tmp_path)
    config.levels = [[0, "Dabbling"], [500, "Novice"]]
    server = create_server(str(tmp_path / "test.db"), config)
    async with Client(server) as c:
        yield c


async def test_list_tools(client: Client):
    tools = await client.list_tools()
    assert {t.name for t in tools} == {"sg_award", "sg_status", "sg_skill", "sg_export"}


async def test_award_and_inspect(client: Client):
    data = _data(await client.call_tool("sg_award", {"skills": ["python"], "exp": 600}))
    [result] = data["results"]
    assert result["skill"] == "python"
    assert result["exp_awarded"] == 600
    assert result["new_level"] == "Novice"
    assert result["created"] is True

    info = _data(await client.call_tool("sg_skill", {"name": "python"}))
    assert info["level"] == "Novice"
    assert info["total_experience"] == 600


async def test_award_requires_names(client: Client):
    data = _data(await client.call_tool("sg_award", {"skills": ["  "]}))
    assert "error" in data


async def test_award_overdue_penalty(client: Client):
    data = _data(
        await client.call_tool("sg_award", {"skills": ["coding"], "exp": 10, "offset_days": -20})
    )
    assert data["results"][0]["exp_awarded"] == 5


async def test_skill_not_found(client: Client):
    data = _data(await client.call_tool("sg_skill", {"name": "nope"}))
    assert data["error"].startswith("Skill not found")


async def test_status(client: Client):
    await client.call_tool("sg_award", {"skills": ["a", "b"], "exp": 10})
    data = _data(await client.call_tool("sg_status", {}))
    assert data["skills"] == 2
    assert data["experience"] == 20
    assert "Dabbling" in data["status"]


async def test_export_json_and_dot(client: Client):
    await client.call_tool(
        "sg_award", {"skills": ["python"], "exp": 10, "depends_on": ["programming"]}
    )
    await client.call_tool("sg_award", {"skills": ["programming"], "exp": 10})

    data = _data(await client.call_tool("sg_export", {}))
    assert {n["name"] for n in data["nodes"]} == {"python", "programming"}
    assert data["edges"][0]["target"] == "programming"

    dot = _data(await client.call_tool("sg_export", {"format": "dot"}))["dot"]
    assert "python -> programming" in dot


async def test_award_depends_on_accepts_weights(client: Client):
    await client.call_tool(
        "sg_award",
        {"skills": ["python"], "exp": 10, "depends_on": ["programming:0.5", "typing"]},
    )
    info = _data(await client.call_tool("sg_skill", {"name": "python"}))
    assert info["dependencies"] == [["programming", 0.5], "typing"]

    data = _data(await client.call_tool("sg_export", {}))
    assert data["nodes"][0]["name"] == "python"


async def test_award_depends_on_rejects_bad_weight(client: Client):
    for spec in ("programming:heavy", "programming:inf", "programming:-1"):
        data = _data(
            await client.call_tool(
                "sg_award", {"skills": ["python"], "exp": 10, "depends_on": [spec]}
            )
        )
        assert "invalid weight" in data["error"]
    data = _data(await client.call_tool("sg_skill", {"name": "python"}))
    assert data["error"].startswith("Skill not found")
