"""
Execution Engine
================

The bounded tool-calling loop for one task.

    Idle ──► Running ──► Completed
                 │
                 └─────► Failed  (provider error, configuration error,
                                  max iterations, cancellation)

Loop:
    messages = [system prompt] + last N history messages + task turn
    repeat up to max_iterations times:
        check cancellation
        ask the model for one completion (tools declared)
        no tool calls?  -> task completed with the response content
        otherwise, for each tool call in the order returned:
            check cancellation
            run it (failures are contained in a ToolResult)
        append one assistant turn carrying all the calls,
        then one tool turn per result
    cap reached -> MaxIterationsExceeded

The engine keeps no state between runs. Everything it touches during a run
(the agent's history, tool registry and model id) is passed in and only
read; the transcript it builds is returned to the caller.
"""

import asyncio
from dataclasses import dataclass, field

from switchboard.agent.observer import AgentObserver
from switchboard.agent.tools_executor import ToolExecutor
from switchboard.errors import (
    CancellationError,
    ConfigurationError,
    InvalidTaskTransition,
    MaxIterationsExceeded,
    ProviderError,
    SwitchboardError,
)
from switchboard.providers import ModelClient
from switchboard.tools import MCPTool
from switchboard.types import (
    CompletionResponse,
    Message,
    Task,
    TaskResult,
    ToolResult,
    Usage,
)
from switchboard.utils.logger import Logger

logger = Logger("Engine")


class CancellationToken:
    """
    Cooperative cancellation flag for one task.

    The engine checks it at the top of every iteration and before every
    tool dispatch. A tool call already running is allowed to finish.

    Example:
        token = CancellationToken()
        run = asyncio.create_task(registry.execute_task(task, cancel=token))
        token.cancel("User pressed Ctrl+C")
    """

    def __init__(self):
        self._cancelled = False
        self.reason: str | None = None

    def cancel(self, reason: str = "Task was cancelled") -> None:
        if not self._cancelled:
            self._cancelled = True
            self.reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancellationError(self.reason or "Task was cancelled")


@dataclass
class ExecutionOutcome:
    """
    Result of one engine run.

    Attributes:
        result: The TaskResult also recorded on the task
        transcript: Messages produced during the run, starting with the
            task turn (tool turns included, system prompt and history excluded)
    """
    result: TaskResult
    transcript: list[Message] = field(default_factory=list)


class ExecutionEngine:
    """
    Runs tasks for one agent.

    Example:
        engine = ExecutionEngine(client, ToolExecutor(registry), "coding-agent", prompt)
        outcome = await engine.run(task, "openai:gpt-4o", history)
        print(outcome.result.output)
    """

    def __init__(
        self,
        client: ModelClient,
        executor: ToolExecutor,
        agent_id: str,
        system_prompt: str,
        max_iterations: int = 10,
        history_window: int = 10,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        observer: AgentObserver | None = None
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.client = client
        self.executor = executor
        self.agent_id = agent_id
        self.system_prompt = system_prompt
        self.max_iterations = max_iterations
        self.history_window = history_window
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.observer = observer
        self.logger = logger.child(agent_id)

    def build_messages(self, task: Task, history: list[Message]) -> list[Message]:
        """
        Build the opening conversation for a task.

        Returns:
            System prompt, the trailing history window (oldest first), then
            the task as a user turn
        """
        window = history[-self.history_window:] if self.history_window > 0 else []
        return [
            Message.system(self.system_prompt),
            *window,
            Message(
                role="user",
                content=f"Task: {task.title}\n\nDescription: {task.description}",
                agent_id=self.agent_id,
            ),
        ]

    async def run(
        self,
        task: Task,
        model: str | None,
        history: list[Message],
        cancel: CancellationToken | None = None
    ) -> ExecutionOutcome:
        """
        Run the tool loop for a task until it completes or fails.

        Sets the task's terminal status and result. Never raises for task
        failures; they are reported in the returned result.

        Args:
            task: The task to run (must not be finished already)
            model: Model id to address, or None when no model is available
            history: Prior conversation, read only
            cancel: Optional cancellation token

        Returns:
            ExecutionOutcome with the result and the run's transcript

        Raises:
            InvalidTaskTransition: If the task already reached a terminal status
        """
        if task.status.is_terminal:
            raise InvalidTaskTransition(
                f"Task {task.id} already finished as '{task.status.value}'"
            )

        cancel = cancel or CancellationToken()
        messages = self.build_messages(task, history)
        transcript_start = len(messages) - 1
        iterations = 0
        usage: Usage | None = None

        self._notify("on_started", task)
        self.logger.info(f"Starting task: {task.title}")

        try:
            if model is None:
                raise ConfigurationError(f"No model available for {self.agent_id}")

            tools = self.executor.registry.get_all()

            while iterations < self.max_iterations:
                cancel.raise_if_cancelled()
                iterations += 1
                self._notify("on_thinking", iterations)
                self.logger.debug(f"Iteration {iterations}")

                response = await self._complete(model, messages, tools)
                if response.usage:
                    usage = response.usage if usage is None else usage + response.usage

                if not response.has_tool_calls:
                    messages.append(Message.assistant(response.content, agent_id=self.agent_id))
                    result = TaskResult(
                        success=True,
                        output=response.content,
                        iterations=iterations,
                        usage=usage,
                    )
                    task.complete(result)
                    self._notify("on_completed", task, result)
                    self.logger.info(f"Completed in {iterations} iteration(s)")
                    return ExecutionOutcome(result, messages[transcript_start:])

                await self._dispatch(response, messages, cancel)

            raise MaxIterationsExceeded(self.max_iterations)

        except SwitchboardError as e:
            return self._fail(task, e, iterations, usage, messages[transcript_start:])
        except asyncio.CancelledError:
            self._fail(
                task, CancellationError("Task was cancelled"), iterations, usage,
                messages[transcript_start:],
            )
            raise
        except Exception as e:
            self.logger.error("Unexpected error in tool loop", e)
            return self._fail(task, e, iterations, usage, messages[transcript_start:])

    async def _complete(
        self,
        model: str,
        messages: list[Message],
        tools: list[MCPTool]
    ) -> CompletionResponse:
        """Request one completion; backend failures are reported as ProviderError."""
        try:
            return await self.client.complete(
                model=model,
                messages=messages,
                tools=tools or None,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except SwitchboardError:
            raise
        except Exception as e:
            raise ProviderError(str(e) or type(e).__name__) from e

    async def _dispatch(
        self,
        response: CompletionResponse,
        messages: list[Message],
        cancel: CancellationToken
    ) -> None:
        """
        Run the response's tool calls sequentially, in the order returned.

        The assistant turn and one tool turn per finished call are appended to
        messages even when cancellation stops the batch part way through. The
        assistant turn then carries only the calls that ran.

        Args:
            response: Completion that requested the tool calls
            messages: Conversation to append the turns to
            cancel: Checked before each call starts
        """
        results: list[ToolResult] = []
        try:
            for tool_call in response.tool_calls:
                cancel.raise_if_cancelled()
                self._notify("on_tool_call", tool_call)
                result = await self.executor.execute_one(tool_call)
                self._notify("on_tool_result", result)
                results.append(result)
        finally:
            if results:
                messages.append(Message.assistant(
                    response.content,
                    tool_calls=response.tool_calls[:len(results)],
                    agent_id=self.agent_id,
                ))
                messages.extend(Message.tool(r, agent_id=self.agent_id) for r in results)

    def _fail(
        self,
        task: Task,
        error: Exception,
        iterations: int,
        usage: Usage | None,
        transcript: list[Message]
    ) -> ExecutionOutcome:
        result = TaskResult(
            success=False,
            error=str(error) or type(error).__name__,
            error_kind=getattr(error, "kind", "error"),
            iterations=iterations,
            usage=usage,
        )
        task.fail(result)
        self._notify("on_failed", task, error)
        self.logger.warning(f"Task failed ({result.error_kind}): {result.error}")
        return ExecutionOutcome(result, transcript)

    def _notify(self, hook: str, *args) -> None:
        """Call an observer hook; observer errors are logged and dropped."""
        if self.observer is None:
            return
        try:
            getattr(self.observer, hook)(self.agent_id, *args)
        except Exception as e:
            self.logger.error(f"Observer hook {hook} raised", e)
