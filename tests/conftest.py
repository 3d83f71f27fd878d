"""
Shared pytest fixtures: small tools with predictable behavior and a
registry holding them.
"""

import asyncio

import pytest

from switchboard.tools import MCPTool, ToolRegistry
from switchboard.types import ToolResult


async def _echo(params: dict) -> ToolResult:
    return ToolResult.ok(f"echo: {params['text']}")


async def _explode(params: dict) -> ToolResult:
    raise RuntimeError("disk on fire")


async def _slow(params: dict) -> ToolResult:
    await asyncio.sleep(5)
    return ToolResult.ok("too late")


@pytest.fixture
def echo_tool():
    return MCPTool(
        name="echo",
        description="Echo text back",
        parameters={
            "type": "object",
            "properties": {"text": {"type": "string"}},
            "required": ["text"],
        },
        execute=_echo,
    )


@pytest.fixture
def failing_tool():
    return MCPTool(
        name="explode",
        description="Always raises",
        parameters={"type": "object", "properties": {}},
        execute=_explode,
    )


@pytest.fixture
def slow_tool():
    return MCPTool(
        name="slow",
        description="Takes too long",
        parameters={"type": "object", "properties": {}},
        execute=_slow,
    )


@pytest.fixture
def tool_registry(echo_tool, failing_tool, slow_tool):
    return ToolRegistry([echo_tool, failing_tool, slow_tool])
