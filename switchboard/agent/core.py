"""
Agent Core
==========

One concrete agent class, specialized by an AgentProfile.

An agent owns:
- its profile (role, type, system prompt, sampling settings)
- its tool registry (built per role from the stub catalog)
- its state (conversation history, active flag, current task)
- the model id chosen at initialize()

Task flow:
    Registry.execute_task(task)
         │
         ▼
    Agent.execute(task)          one task at a time per agent
         │
         ▼
    ExecutionEngine.run(task, model, history snapshot)
         │
         ▼
    TaskResult  ──► on success the task turn and the final answer are
                    appended to the agent's history

The engine works on its own copy of the conversation; the shared history
is only touched after the run ends, while the agent's lock is held.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

from switchboard.agent.engine import CancellationToken, ExecutionEngine
from switchboard.agent.observer import AgentObserver
from switchboard.agent.profiles import AgentProfile
from switchboard.agent.tools_executor import ToolExecutor
from switchboard.providers import ModelCatalog, ModelClient
from switchboard.tools import ToolRegistry
from switchboard.tools.catalog import build_registry
from switchboard.types import AgentType, Message, Task, TaskResult, TaskStatus
from switchboard.utils.config import AgentSettings
from switchboard.utils.logger import Logger

logger = Logger("Agent")

# History is trimmed to HISTORY_KEEP messages once it grows past HISTORY_LIMIT
HISTORY_LIMIT = 50
HISTORY_KEEP = 30


@dataclass
class AgentState:
    """
    Mutable runtime state of an agent.

    Attributes:
        agent_id: Owning agent
        history: Conversation history, oldest first
        is_active: True while a task is running
        current_task: The running task, if any
        last_activity: When the agent last started or finished a task
    """
    agent_id: str
    history: list[Message] = field(default_factory=list)
    is_active: bool = False
    current_task: Task | None = None
    last_activity: datetime | None = None


class Agent:
    """
    A task-executing agent.

    Example:
        agent = Agent(CODING_PROFILE, client, settings)
        agent.initialize(catalog)

        task = Task(title="Fix login bug", description="...", type="work")
        result = await agent.execute(task)
        print(result.output if result.success else result.error)
    """

    def __init__(
        self,
        profile: AgentProfile,
        client: ModelClient,
        settings: AgentSettings | None = None,
        tools: ToolRegistry | None = None,
        observer: AgentObserver | None = None
    ):
        """
        Initialize the agent.

        Args:
            profile: What this agent is
            client: Model client shared by all agents
            settings: Engine limits (defaults when omitted)
            tools: Tool registry (built from the role's stub set when omitted)
            observer: Optional progress observer
        """
        settings = settings or AgentSettings()

        self.profile = profile
        self.settings = settings
        self.tools = tools if tools is not None else build_registry(profile.role)
        self.model_id: str | None = None
        self.state = AgentState(agent_id=profile.id)
        self._lock = asyncio.Lock()

        self.engine = ExecutionEngine(
            client=client,
            executor=ToolExecutor(self.tools, timeout=settings.tool_timeout),
            agent_id=profile.id,
            system_prompt=profile.system_prompt,
            max_iterations=settings.max_iterations,
            history_window=settings.history_window,
            max_tokens=profile.max_tokens or settings.max_tokens,
            temperature=(
                profile.temperature if profile.temperature is not None
                else settings.temperature
            ),
            observer=observer,
        )
        self.logger = logger.child(profile.id)

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def role(self) -> str:
        return self.profile.role

    @property
    def type(self) -> AgentType:
        return self.profile.type

    def initialize(self, catalog: ModelCatalog, model: str | None = None) -> None:
        """
        Choose the model this agent will use.

        Args:
            catalog: Published models
            model: Explicit model id; overrides catalog selection
        """
        if model:
            self.model_id = model
        else:
            info = catalog.select_for(self.type)
            self.model_id = info.id if info else None

        if self.model_id:
            self.logger.info(f"Initialized with model: {self.model_id}")
        else:
            self.logger.warning("No models available; tasks will fail until one is configured")

    async def execute(
        self,
        task: Task,
        cancel: CancellationToken | None = None
    ) -> TaskResult:
        """
        Execute a task.

        Calls for the same agent run one after another. The task is started
        here if the caller has not done so already.

        Args:
            task: The task to run
            cancel: Optional cancellation token

        Returns:
            The TaskResult (also recorded on the task)
        """
        async with self._lock:
            if task.status in (TaskStatus.PENDING, TaskStatus.WAITING_INPUT):
                task.start(self.id)

            self.state.is_active = True
            self.state.current_task = task
            self.state.last_activity = datetime.now()

            try:
                outcome = await self.engine.run(
                    task,
                    self.model_id,
                    list(self.state.history),
                    cancel,
                )
            finally:
                self.state.is_active = False
                self.state.current_task = None
                self.state.last_activity = datetime.now()

            if outcome.result.success and outcome.transcript:
                self.add_to_history(outcome.transcript[0])
                self.add_to_history(outcome.transcript[-1])

            return outcome.result

    # ==========================================================================
    # History & state
    # ==========================================================================

    def add_to_history(self, message: Message) -> None:
        """Append to the history, trimming it once it grows past the limit."""
        self.state.history.append(message)
        if len(self.state.history) > HISTORY_LIMIT:
            self.state.history = self.state.history[-HISTORY_KEEP:]

    def clear_history(self) -> None:
        self.state.history = []
        self.logger.info("Cleared history")

    def get_state(self) -> AgentState:
        """Snapshot of the agent's state (the history list is copied)."""
        return AgentState(
            agent_id=self.state.agent_id,
            history=list(self.state.history),
            is_active=self.state.is_active,
            current_task=self.state.current_task,
            last_activity=self.state.last_activity,
        )

    def is_active(self) -> bool:
        return self.state.is_active

    def get_status(self) -> dict:
        """Status summary for display."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "type": self.type.value,
            "model": self.model_id,
            "active": self.state.is_active,
            "tools": self.tools.list_names(),
            "history": len(self.state.history),
        }
