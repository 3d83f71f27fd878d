"""
Agent Registry
==============

Holds one live agent per role and dispatches tasks to them.

Agents are addressable by role ("coding") and by id ("coding-agent").

Dispatch:
    1. Exact match on the task's category (task.metadata["category"])
    2. Otherwise the default for the task type:
         work     -> coding
         personal -> chat

The registry does no queuing of its own: each agent runs its tasks one at
a time, and tasks for different agents may run concurrently.
"""

from switchboard.agent.core import Agent
from switchboard.agent.engine import CancellationToken
from switchboard.agent.observer import AgentObserver
from switchboard.agent.profiles import DEFAULT_PROFILES, AgentProfile
from switchboard.errors import ConfigurationError
from switchboard.memory import MemoryJournal
from switchboard.providers import ModelCatalog, ModelClient
from switchboard.types import AgentType, Task, TaskResult
from switchboard.utils.config import AgentSettings
from switchboard.utils.logger import Logger

logger = Logger("AgentRegistry")

DEFAULT_AGENT_ROLES: dict[AgentType, str] = {
    AgentType.WORK: "coding",
    AgentType.PERSONAL: "chat",
}


class AgentRegistry:
    """
    Registry of all agents.

    Example:
        registry = AgentRegistry.from_profiles(DEFAULT_PROFILES, client, settings)
        registry.initialize(catalog)

        result = await registry.execute_task(task)
        for status in registry.get_status():
            print(status["id"], status["active"])
    """

    def __init__(self, journal: MemoryJournal | None = None):
        """
        Initialize an empty registry.

        Args:
            journal: Where finished tasks are stored (optional)
        """
        self.journal = journal
        self._agents: dict[str, Agent] = {}
        self._by_role: dict[str, Agent] = {}

    @classmethod
    def from_profiles(
        cls,
        profiles: list[AgentProfile],
        client: ModelClient,
        settings: AgentSettings | None = None,
        observer: AgentObserver | None = None,
        journal: MemoryJournal | None = None
    ) -> "AgentRegistry":
        """Build a registry with one agent per profile."""
        registry = cls(journal=journal)
        for profile in profiles:
            registry.register(Agent(profile, client, settings, observer=observer))
        return registry

    @classmethod
    def default(
        cls,
        client: ModelClient,
        settings: AgentSettings | None = None,
        observer: AgentObserver | None = None,
        journal: MemoryJournal | None = None
    ) -> "AgentRegistry":
        """Registry with the nine standard agents."""
        return cls.from_profiles(DEFAULT_PROFILES, client, settings, observer, journal)

    def register(self, agent: Agent) -> None:
        """
        Add an agent.

        Raises:
            ValueError: If an agent with the same id or role exists
        """
        if agent.id in self._agents or agent.role in self._by_role:
            raise ValueError(f"Agent '{agent.id}' is already registered")

        self._agents[agent.id] = agent
        self._by_role[agent.role] = agent
        logger.debug(f"Registered agent: {agent.id}")

    def initialize(
        self,
        catalog: ModelCatalog,
        work_model: str | None = None,
        personal_model: str | None = None
    ) -> None:
        """
        Pick a model for every agent.

        Args:
            catalog: Published models
            work_model: Explicit model for work agents (overrides selection)
            personal_model: Explicit model for personal agents (overrides selection)
        """
        for agent in self.all_agents():
            preferred = work_model if agent.type == AgentType.WORK else personal_model
            agent.initialize(catalog, preferred)

        logger.info(f"Agent registry initialized with {len(self._agents)} agents")

    # ==========================================================================
    # Lookup
    # ==========================================================================

    def get_agent(self, id_or_role: str) -> Agent | None:
        return self._agents.get(id_or_role) or self._by_role.get(id_or_role)

    def find_agent_for_task(self, task: Task) -> Agent | None:
        """Agent for the task's category, else the default for its type."""
        category = task.category
        if category and category in self._by_role:
            return self._by_role[category]

        return self._by_role.get(DEFAULT_AGENT_ROLES[task.type])

    def work_agents(self) -> list[Agent]:
        return [a for a in self._agents.values() if a.type == AgentType.WORK]

    def personal_agents(self) -> list[Agent]:
        return [a for a in self._agents.values() if a.type == AgentType.PERSONAL]

    def all_agents(self) -> list[Agent]:
        return list(self._agents.values())

    # ==========================================================================
    # Dispatch
    # ==========================================================================

    async def execute_task(
        self,
        task: Task,
        cancel: CancellationToken | None = None
    ) -> TaskResult:
        """
        Run a task on the agent chosen for it.

        Marks the task in progress, assigns it, waits for the agent and
        stores the finished task in the journal.

        Args:
            task: A pending task
            cancel: Optional cancellation token

        Returns:
            The task's result

        Raises:
            ConfigurationError: If no agent can take the task
        """
        agent = self.find_agent_for_task(task)
        if agent is None:
            raise ConfigurationError(f"No agent found for task: {task.title}")

        task.start(agent.id)
        logger.info(f"Dispatching '{task.title}' to {agent.id}")

        result = await agent.execute(task, cancel)

        if self.journal is not None:
            self.journal.store_task(task)

        return result

    def get_status(self) -> list[dict]:
        """Status of every agent, in registration order."""
        return [agent.get_status() for agent in self.all_agents()]

    def __len__(self) -> int:
        return len(self._agents)
