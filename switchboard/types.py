"""
Core Types
==========

The data model shared by the provider adapter, the execution engine, the
classifier and the registry.

Conversation:
    Message      - one turn (user, assistant, system or tool)
    ToolCall     - a tool invocation requested by the model
    ToolResult   - the contained outcome of one tool call

Work:
    Task         - a routed unit of work with a pending -> terminal lifecycle
    TaskResult   - the outcome recorded on a finished task

Classification:
    Intent, ExtractedTask, Classification

Models:
    ModelCapabilities, ModelInfo, ProviderConfig, Usage, CompletionResponse

Invariants enforced here:
- tool calls only appear on assistant messages, tool results only on tool
  messages, and a tool message carries exactly one result
- a ToolResult has an output iff it succeeded and an error iff it failed
- a Task reaches a terminal status exactly once
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from switchboard.errors import InvalidTaskTransition


def generate_id() -> str:
    """Generate a unique ID."""
    return str(uuid.uuid4())


# ==============================================================================
# Enumerations
# ==============================================================================

class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class AgentType(str, Enum):
    WORK = "work"
    PERSONAL = "personal"


class IntentType(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    UNCLEAR = "unclear"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    WAITING_INPUT = "waiting_input"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


class FinishReason(str, Enum):
    STOP = "stop"
    TOOL_CALLS = "tool_calls"
    LENGTH = "length"
    ERROR = "error"


class ModelProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    LMSTUDIO = "lmstudio"
    OLLAMA = "ollama"


# ==============================================================================
# Conversation
# ==============================================================================

@dataclass
class ToolCall:
    """
    A tool invocation requested by the model.

    Attributes:
        id: Opaque call ID, unique within a turn
        name: The tool name
        arguments: Parsed arguments (validated against the tool schema
            before dispatch)
    """
    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolResult:
    """
    Contained result of one tool call.

    Exactly one of `output` / `error` is set, matching `success`. Build
    results with ToolResult.ok() and ToolResult.fail().

    Example:
        ToolResult.ok({"issue_number": 42})
        ToolResult.fail("Repository not found")
    """
    success: bool
    output: str | None = None
    error: str | None = None
    tool_call_id: str = ""

    def __post_init__(self):
        if self.success and (self.output is None or self.error is not None):
            raise ValueError("A successful ToolResult needs an output and no error")
        if not self.success and (not self.error or self.output is not None):
            raise ValueError("A failed ToolResult needs an error and no output")

    @classmethod
    def ok(cls, output: Any, tool_call_id: str = "") -> "ToolResult":
        """Create a successful result; non-string output is JSON encoded."""
        if not isinstance(output, str):
            output = json.dumps(output, default=str)
        return cls(success=True, output=output, tool_call_id=tool_call_id)

    @classmethod
    def fail(cls, error: str, tool_call_id: str = "") -> "ToolResult":
        """Create a failed result."""
        return cls(success=False, error=error or "Unknown error", tool_call_id=tool_call_id)

    def to_message(self) -> str:
        """Format as the content of a tool message."""
        if self.success:
            return self.output or ""
        return f"Error: {self.error}"

    def to_dict(self) -> dict:
        return {
            "toolCallId": self.tool_call_id,
            "success": self.success,
            "output": self.output,
            "error": self.error,
        }


@dataclass
class Message:
    """
    A single conversation turn.

    Attributes:
        role: Who produced the message
        content: The message text
        id: Unique message ID
        timestamp: When the message was created
        agent_id: The agent that produced or received the message
        tool_calls: Tool calls issued by an assistant message
        tool_results: The single result carried by a tool message
    """
    role: MessageRole
    content: str
    id: str = field(default_factory=generate_id)
    timestamp: datetime = field(default_factory=datetime.now)
    agent_id: str | None = None
    tool_calls: list[ToolCall] | None = None
    tool_results: list[ToolResult] | None = None

    def __post_init__(self):
        self.role = MessageRole(self.role)

        if self.tool_calls and self.role != MessageRole.ASSISTANT:
            raise ValueError("Only assistant messages can carry tool calls")
        if self.tool_results and self.role != MessageRole.TOOL:
            raise ValueError("Only tool messages can carry tool results")
        if self.role == MessageRole.TOOL and len(self.tool_results or []) != 1:
            raise ValueError("A tool message carries exactly one tool result")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(
        cls,
        content: str,
        tool_calls: list[ToolCall] | None = None,
        agent_id: str | None = None
    ) -> "Message":
        return cls(
            role=MessageRole.ASSISTANT,
            content=content,
            tool_calls=tool_calls or None,
            agent_id=agent_id,
        )

    @classmethod
    def tool(cls, result: ToolResult, agent_id: str | None = None) -> "Message":
        """Build the tool message for one result; content is the output or error."""
        return cls(
            role=MessageRole.TOOL,
            content=result.output if result.success else (result.error or ""),
            tool_results=[result],
            agent_id=agent_id,
        )

    @property
    def tool_result(self) -> ToolResult | None:
        """The result carried by a tool message."""
        return self.tool_results[0] if self.tool_results else None


# ==============================================================================
# Tasks
# ==============================================================================

@dataclass
class Usage:
    """Token usage normalized across backends."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


@dataclass
class TaskResult:
    """
    Outcome of a task.

    Attributes:
        success: Whether the agent produced a final answer
        output: The final answer text
        error: Error message when the task failed
        error_kind: Stable failure category (see switchboard.errors)
        iterations: Completion requests issued by the tool loop
        usage: Token usage summed over all completions
    """
    success: bool
    output: str | None = None
    error: str | None = None
    error_kind: str | None = None
    iterations: int = 0
    usage: Usage | None = None


@dataclass
class Task:
    """
    A routed unit of work.

    Lifecycle:
        pending -> in_progress (registry dispatch) -> completed | failed
    The terminal status is set exactly once, by the execution engine.
    """
    title: str
    description: str
    type: AgentType
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    id: str = field(default_factory=generate_id)
    assigned_agent: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    result: TaskResult | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.type = AgentType(self.type)
        self.priority = TaskPriority(self.priority)
        self.status = TaskStatus(self.status)

    @property
    def category(self) -> str | None:
        return self.metadata.get("category")

    def start(self, agent_id: str) -> None:
        """Mark the task as dispatched to an agent."""
        if self.status not in (TaskStatus.PENDING, TaskStatus.WAITING_INPUT):
            raise InvalidTaskTransition(
                f"Task {self.id} cannot start from status '{self.status.value}'"
            )
        self.assigned_agent = agent_id
        self.status = TaskStatus.IN_PROGRESS
        self.updated_at = datetime.now()

    def complete(self, result: TaskResult) -> None:
        self._finish(TaskStatus.COMPLETED, result)
        self.completed_at = self.updated_at

    def fail(self, result: TaskResult) -> None:
        self._finish(TaskStatus.FAILED, result)

    def _finish(self, status: TaskStatus, result: TaskResult) -> None:
        if self.status.is_terminal:
            raise InvalidTaskTransition(
                f"Task {self.id} already finished as '{self.status.value}'"
            )
        self.status = status
        self.result = result
        self.updated_at = datetime.now()


# ==============================================================================
# Classification
# ==============================================================================

@dataclass
class Intent:
    type: IntentType
    confidence: float
    category: str
    suggested_agent: str | None = None
    requires_human_approval: bool = False
    reasoning: str = ""

    def __post_init__(self):
        self.type = IntentType(self.type)
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be in [0, 1], got {self.confidence}")


@dataclass
class ExtractedTask:
    title: str
    description: str
    priority: TaskPriority = TaskPriority.MEDIUM
    tools: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.priority = TaskPriority(self.priority)


@dataclass
class Classification:
    """
    Classifier output.

    `source` records which stage decided: "explicit" (tag), "heuristic"
    (keyword counts) or "model" (LLM fallback).
    """
    intent: Intent
    extracted_task: ExtractedTask
    source: str = "heuristic"

    def to_dict(self) -> dict:
        """Convert to the camelCase wire shape."""
        return {
            "intent": {
                "type": self.intent.type.value,
                "confidence": self.intent.confidence,
                "category": self.intent.category,
                "suggestedAgent": self.intent.suggested_agent,
                "requiresHumanApproval": self.intent.requires_human_approval,
                "reasoning": self.intent.reasoning,
            },
            "extractedTask": {
                "title": self.extracted_task.title,
                "description": self.extracted_task.description,
                "priority": self.extracted_task.priority.value,
                "tools": list(self.extracted_task.tools),
            },
        }

    @classmethod
    def from_dict(cls, data: dict, source: str = "model") -> "Classification":
        """Build from the camelCase wire shape (assumed already validated)."""
        intent = data["intent"]
        task = data["extractedTask"]
        return cls(
            intent=Intent(
                type=intent["type"],
                confidence=float(intent["confidence"]),
                category=intent["category"],
                suggested_agent=intent.get("suggestedAgent"),
                requires_human_approval=bool(intent.get("requiresHumanApproval", False)),
                reasoning=intent.get("reasoning", ""),
            ),
            extracted_task=ExtractedTask(
                title=task["title"],
                description=task["description"],
                priority=task["priority"],
                tools=list(task.get("tools", [])),
            ),
            source=source,
        )


# ==============================================================================
# Models & Providers
# ==============================================================================

@dataclass(frozen=True)
class ModelCapabilities:
    context_window: int = 8192
    supports_tools: bool = False
    supports_vision: bool = False
    supports_streaming: bool = True
    max_output_tokens: int = 2048


@dataclass(frozen=True)
class ModelInfo:
    """
    Read-only facts about a model, published by model discovery.

    `id` is the routable identifier ("provider:name"), `name` the bare
    model name the backend expects.
    """
    id: str
    name: str
    provider: ModelProvider
    is_local: bool
    capabilities: ModelCapabilities = field(default_factory=ModelCapabilities)
    is_available: bool = True


@dataclass(frozen=True)
class ProviderConfig:
    provider: ModelProvider
    api_key: str | None = None
    base_url: str | None = None
    default_model: str | None = None
    is_enabled: bool = True


@dataclass
class CompletionResponse:
    """Provider-agnostic completion result."""
    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    usage: Usage | None = None
    finish_reason: FinishReason = FinishReason.STOP

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)
