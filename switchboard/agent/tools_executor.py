"""
Tool Executor
=============

Runs the tool calls a model asks for, one at a time, and turns every
outcome into a ToolResult addressed to the originating call.

For each call the executor:
1. Resolves the tool by name in the agent's registry
2. Validates the arguments against the tool's JSON Schema
3. Runs the tool under a deadline
4. Stamps the result with the tool call ID

Nothing a tool does escapes as an exception. Unknown tools, invalid
arguments, timeouts and raised exceptions all come back as
ToolResult(success=False, error=...), so the tool loop keeps going and the
failure is still visible to the model in the transcript.
"""

import asyncio
from dataclasses import replace

from switchboard.errors import ToolExecutionError
from switchboard.tools import ToolRegistry
from switchboard.types import ToolCall, ToolResult
from switchboard.utils.logger import Logger

logger = Logger("ToolExecutor")


class ToolExecutor:
    """
    Executes tools called by the model.

    Example:
        executor = ToolExecutor(agent_registry, timeout=30)

        for tool_call in response.tool_calls:
            result = await executor.execute_one(tool_call)
            messages.append(Message.tool(result))
    """

    def __init__(self, registry: ToolRegistry, timeout: float = 30.0):
        """
        Initialize the tool executor.

        Args:
            registry: The agent's tool registry
            timeout: Deadline in seconds for each tool call
        """
        self.registry = registry
        self.timeout = timeout

    async def execute_one(self, tool_call: ToolCall) -> ToolResult:
        """
        Execute a single tool call.

        Args:
            tool_call: The tool call to execute

        Returns:
            ToolResult with tool_call_id set to the call's ID
        """
        tool = self.registry.get(tool_call.name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {tool_call.name}")
            return ToolResult.fail(f"Unknown tool: {tool_call.name}", tool_call.id)

        errors = tool.validate(tool_call.arguments)
        if errors:
            logger.warning(f"Invalid arguments for {tool_call.name}", {"errors": errors})
            return ToolResult.fail(
                f"Invalid arguments for {tool_call.name}: {'; '.join(errors)}",
                tool_call.id,
            )

        logger.info(f"Executing tool: {tool_call.name}")

        try:
            async with asyncio.timeout(self.timeout):
                result = await tool.execute(dict(tool_call.arguments))
        except TimeoutError:
            logger.warning(f"Tool {tool_call.name} timed out after {self.timeout:g}s")
            return ToolResult.fail(
                f"Tool '{tool_call.name}' timed out after {self.timeout:g}s",
                tool_call.id,
            )
        except Exception as e:
            error = ToolExecutionError(tool_call.name, str(e) or type(e).__name__)
            logger.error(f"Tool execution failed: {tool_call.name}", error)
            return ToolResult.fail(str(error), tool_call.id)

        if not isinstance(result, ToolResult):
            logger.warning(f"Tool {tool_call.name} returned {type(result).__name__}")
            return ToolResult.fail(
                f"Tool '{tool_call.name}' returned {type(result).__name__} instead of a ToolResult",
                tool_call.id,
            )

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return replace(result, tool_call_id=tool_call.id)

    def get_available_tools(self) -> list[str]:
        """Get list of available tool names."""
        return self.registry.list_names()
