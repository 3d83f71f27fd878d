"""
Tools
=====

Tools follow the Model Context Protocol (MCP) pattern: each tool has a
name, a description, a JSON Schema for its parameters and an async execute
function returning a ToolResult.

How tools are used:
1. An agent owns a ToolRegistry holding its tools
2. The provider adapter declares the tools to the model
3. The model answers with tool calls
4. The ToolExecutor validates the arguments against the tool's schema,
   runs the tool and contains any failure in a ToolResult
5. The result goes back to the model on the next iteration

Concrete tool implementations live outside this package's scope; the
stubs in switchboard.tools.catalog stand in for them.

This module provides:
- MCPTool for defining tools
- ToolRegistry for managing an agent's tools
- ToolResult (re-exported from switchboard.types)
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import jsonschema

from switchboard.types import ToolResult
from switchboard.utils.logger import Logger

logger = Logger("Tools")


@dataclass
class MCPTool:
    """
    Definition of a tool following the MCP pattern.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model)
        parameters: JSON Schema for the parameters
        execute: Async function that runs the tool

    Example:
        async def send_message(params: dict) -> ToolResult:
            return ToolResult.ok(f"Sent message to {params['channel']}")

        tool = MCPTool(
            name="send_message",
            description="Send a message to a Slack channel or user",
            parameters={
                "type": "object",
                "properties": {
                    "channel": {"type": "string", "description": "Channel name or user ID"},
                    "message": {"type": "string", "description": "Message to send"}
                },
                "required": ["channel", "message"]
            },
            execute=send_message
        )
    """
    name: str
    description: str
    parameters: dict
    execute: Callable[[dict], Awaitable[ToolResult]]

    def __post_init__(self):
        # Reject broken declarations at definition time, not on first call
        jsonschema.Draft202012Validator.check_schema(self.parameters)
        self._validator = jsonschema.Draft202012Validator(self.parameters)

    def validate(self, arguments: dict[str, Any]) -> list[str]:
        """
        Validate call arguments against the parameter schema.

        Args:
            arguments: Arguments supplied by the model

        Returns:
            Human-readable validation errors (empty when valid)
        """
        errors = sorted(self._validator.iter_errors(arguments), key=lambda e: list(e.path))
        return [
            f"{'/'.join(str(p) for p in error.path) or '<root>'}: {error.message}"
            for error in errors
        ]


class ToolRegistry:
    """
    Registry for one agent's tools.

    Each agent owns its own registry; registries are never shared between
    agents and are read-only once the agent is initialized.

    Example:
        registry = ToolRegistry()
        registry.register(my_tool)

        tool = registry.get("my_tool")
        names = registry.list_names()
    """

    def __init__(self, tools: list[MCPTool] | None = None):
        self._tools: dict[str, MCPTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: MCPTool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> MCPTool | None:
        """Get a tool by name, or None if not found."""
        return self._tools.get(name)

    def get_all(self) -> list[MCPTool]:
        """Get all registered tools in registration order."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        """Get list of all tool names."""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


__all__ = [
    "MCPTool",
    "ToolResult",
    "ToolRegistry",
]
