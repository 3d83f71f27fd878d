"""
Agent Observers
===============

Progress notifications from the execution engine. Observers are a side
channel only: the engine calls them, ignores their return values and logs
and drops anything they raise. A task runs the same with or without them.

Hooks, in the order they fire during a task:
    on_started      once, before the first completion
    on_thinking     at the start of every iteration
    on_tool_call    before each tool dispatch
    on_tool_result  after each tool dispatch (success or contained failure)
    on_completed    once, when the task completes
    on_failed       once, when the task fails
"""

from switchboard.types import Task, TaskResult, ToolCall, ToolResult
from switchboard.utils.logger import Logger


class AgentObserver:
    """Base observer; every hook is a no-op. Override what you need."""

    def on_started(self, agent_id: str, task: Task) -> None:
        pass

    def on_thinking(self, agent_id: str, iteration: int) -> None:
        pass

    def on_tool_call(self, agent_id: str, tool_call: ToolCall) -> None:
        pass

    def on_tool_result(self, agent_id: str, result: ToolResult) -> None:
        pass

    def on_completed(self, agent_id: str, task: Task, result: TaskResult) -> None:
        pass

    def on_failed(self, agent_id: str, task: Task, error: Exception) -> None:
        pass


class LoggingObserver(AgentObserver):
    """Writes every notification to the log."""

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or Logger("Progress")

    def on_started(self, agent_id: str, task: Task) -> None:
        self.logger.info(f"{agent_id} started: {task.title}")

    def on_thinking(self, agent_id: str, iteration: int) -> None:
        self.logger.debug(f"{agent_id} processing (iteration {iteration})...")

    def on_tool_call(self, agent_id: str, tool_call: ToolCall) -> None:
        self.logger.info(f"{agent_id} -> {tool_call.name}", tool_call.arguments or None)

    def on_tool_result(self, agent_id: str, result: ToolResult) -> None:
        if result.success:
            self.logger.debug(f"{agent_id} <- ok ({result.tool_call_id})")
        else:
            self.logger.warning(f"{agent_id} <- failed ({result.tool_call_id}): {result.error}")

    def on_completed(self, agent_id: str, task: Task, result: TaskResult) -> None:
        self.logger.info(f"{agent_id} completed '{task.title}' in {result.iterations} iteration(s)")

    def on_failed(self, agent_id: str, task: Task, error: Exception) -> None:
        self.logger.warning(f"{agent_id} failed '{task.title}': {error}")


class RecordingObserver(AgentObserver):
    """Keeps (hook, payload) tuples in order; handy for inspection and tests."""

    def __init__(self):
        self.events: list[tuple[str, object]] = []

    def on_started(self, agent_id: str, task: Task) -> None:
        self.events.append(("started", task.id))

    def on_thinking(self, agent_id: str, iteration: int) -> None:
        self.events.append(("thinking", iteration))

    def on_tool_call(self, agent_id: str, tool_call: ToolCall) -> None:
        self.events.append(("tool_call", tool_call.id))

    def on_tool_result(self, agent_id: str, result: ToolResult) -> None:
        self.events.append(("tool_result", result.tool_call_id))

    def on_completed(self, agent_id: str, task: Task, result: TaskResult) -> None:
        self.events.append(("completed", task.id))

    def on_failed(self, agent_id: str, task: Task, error: Exception) -> None:
        self.events.append(("failed", type(error).__name__))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
