"""Unit tests for agents and the agent registry."""

import asyncio

import pytest
from fakes import FakeModelClient, text_response, tool_response

from switchboard.agent import Agent, AgentRegistry
from switchboard.agent.core import HISTORY_KEEP, HISTORY_LIMIT
from switchboard.agent.profiles import CHAT_PROFILE, CODING_PROFILE, CREATIVE_PROFILE
from switchboard.errors import ConfigurationError
from switchboard.memory import InMemoryJournal
from switchboard.providers import ModelCatalog
from switchboard.types import AgentType, Message, Task, TaskStatus, ToolCall
from switchboard.utils.config import AgentSettings

MODEL = "openai:gpt-4o"


def work_task(title="Fix login bug", category=None):
    metadata = {"category": category} if category else {}
    return Task(title=title, description="Users get a 500", type=AgentType.WORK, metadata=metadata)


class TestAgent:
    async def test_profile_temperature_overrides_settings(self):
        client = FakeModelClient([text_response("A poem.")])
        agent = Agent(CREATIVE_PROFILE, client, AgentSettings(temperature=0.1))
        agent.model_id = MODEL

        await agent.execute(Task(title="Write a poem", description="About rain", type="personal"))

        assert client.calls[0]["temperature"] == 0.9

    async def test_tools_come_from_the_role(self):
        agent = Agent(CODING_PROFILE, FakeModelClient())
        assert agent.tools.list_names() == ["read_file", "write_file"]

        assert len(Agent(CHAT_PROFILE, FakeModelClient()).tools) == 0

    async def test_success_publishes_task_turn_and_answer(self):
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "read_file", {"path": "app.py"})),
            text_response("Fixed it."),
        ])
        agent = Agent(CODING_PROFILE, client)
        agent.model_id = MODEL
        task = work_task()

        result = await agent.execute(task)

        assert result.success
        assert task.status == TaskStatus.COMPLETED
        assert task.assigned_agent == "coding-agent"
        history = agent.get_state().history
        assert [m.content for m in history] == [
            "Task: Fix login bug\n\nDescription: Users get a 500",
            "Fixed it.",
        ]
        assert not agent.is_active()

    async def test_failure_leaves_history_untouched(self):
        agent = Agent(CODING_PROFILE, FakeModelClient([ConnectionError("down")]))
        agent.model_id = MODEL

        result = await agent.execute(work_task())

        assert result.error_kind == "provider_error"
        assert agent.get_state().history == []

    async def test_concurrent_tasks_run_one_after_another(self):
        release = asyncio.Event()
        first_started = asyncio.Event()

        async def slow_answer():
            first_started.set()
            await release.wait()
            return text_response("Fixed it.")

        client = FakeModelClient([slow_answer, text_response("Readme updated.")])
        agent = Agent(CODING_PROFILE, client)
        agent.model_id = MODEL
        readme = work_task("Update readme")

        first = asyncio.create_task(agent.execute(work_task()))
        await first_started.wait()
        second = asyncio.create_task(agent.execute(readme))
        await asyncio.sleep(0.01)

        # Still waiting for the first task to finish
        assert len(client.calls) == 1
        assert readme.status == TaskStatus.PENDING

        release.set()
        results = await asyncio.gather(first, second)

        assert [r.output for r in results] == ["Fixed it.", "Readme updated."]
        assert "Fixed it." in [m.content for m in client.calls[1]["messages"]]
        assert [m.content for m in agent.get_state().history] == [
            "Task: Fix login bug\n\nDescription: Users get a 500",
            "Fixed it.",
            "Task: Update readme\n\nDescription: Users get a 500",
            "Readme updated.",
        ]

    async def test_history_is_passed_to_the_next_task(self):
        client = FakeModelClient([text_response("First."), text_response("Second.")])
        agent = Agent(CODING_PROFILE, client)
        agent.model_id = MODEL

        await agent.execute(work_task("one"))
        await agent.execute(work_task("two"))

        sent = [m.content for m in client.calls[1]["messages"]]
        assert "First." in sent

    def test_history_is_trimmed(self):
        agent = Agent(CHAT_PROFILE, FakeModelClient())

        for i in range(HISTORY_LIMIT + 1):
            agent.add_to_history(Message.user(f"m{i}"))

        history = agent.get_state().history
        assert len(history) == HISTORY_KEEP
        assert history[-1].content == f"m{HISTORY_LIMIT}"

    def test_state_snapshot_is_a_copy(self):
        agent = Agent(CHAT_PROFILE, FakeModelClient())
        agent.get_state().history.append(Message.user("sneaky"))

        assert agent.get_state().history == []

    def test_initialize_selects_by_agent_type(self):
        catalog = ModelCatalog.from_model_ids([
            "anthropic:claude-3-5-sonnet-20241022",
            "ollama:llama3:8b",
        ])
        coding = Agent(CODING_PROFILE, FakeModelClient())
        chat = Agent(CHAT_PROFILE, FakeModelClient())

        coding.initialize(catalog)
        chat.initialize(catalog)

        assert coding.model_id == "anthropic:claude-3-5-sonnet-20241022"
        assert chat.model_id == "ollama:llama3:8b"

    def test_explicit_model_wins(self):
        agent = Agent(CODING_PROFILE, FakeModelClient())
        agent.initialize(ModelCatalog(), model="openai:gpt-4o-mini")

        assert agent.get_status()["model"] == "openai:gpt-4o-mini"

    async def test_empty_catalog_fails_with_configuration_error(self):
        agent = Agent(CODING_PROFILE, FakeModelClient())
        agent.initialize(ModelCatalog())

        result = await agent.execute(work_task())

        assert result.error_kind == "configuration_error"


class TestAgentRegistry:
    def test_default_registry(self):
        registry = AgentRegistry.default(FakeModelClient())

        assert len(registry) == 9
        assert len(registry.work_agents()) == 5
        assert len(registry.personal_agents()) == 4
        assert registry.get_agent("github") is registry.get_agent("github-agent")

    def test_duplicate_role_is_rejected(self):
        registry = AgentRegistry()
        registry.register(Agent(CHAT_PROFILE, FakeModelClient()))

        with pytest.raises(ValueError):
            registry.register(Agent(CHAT_PROFILE, FakeModelClient()))

    def test_category_picks_the_agent(self):
        registry = AgentRegistry.default(FakeModelClient())

        assert registry.find_agent_for_task(work_task(category="github")).id == "github-agent"

    def test_type_defaults(self):
        registry = AgentRegistry.default(FakeModelClient())

        assert registry.find_agent_for_task(work_task(category="unknown")).id == "coding-agent"
        personal = Task(title="Plan trip", description="Weekend", type=AgentType.PERSONAL)
        assert registry.find_agent_for_task(personal).id == "chat-agent"

    async def test_missing_agent_raises(self):
        registry = AgentRegistry()

        with pytest.raises(ConfigurationError):
            await registry.execute_task(work_task())

    async def test_execute_task_assigns_and_stores(self):
        journal = InMemoryJournal()
        client = FakeModelClient([text_response("PR #7 looks good.")])
        registry = AgentRegistry.default(client, journal=journal)
        registry.initialize(ModelCatalog(), work_model=MODEL)
        task = work_task("Review PR", category="github")

        result = await registry.execute_task(task)

        assert result.output == "PR #7 looks good."
        assert task.assigned_agent == "github-agent"
        assert journal.get_task(task.id).status == TaskStatus.COMPLETED

    def test_initialize_uses_models_per_type(self):
        registry = AgentRegistry.default(FakeModelClient())
        registry.initialize(ModelCatalog(), work_model=MODEL, personal_model="ollama:llama3:8b")

        models = {s["id"]: s["model"] for s in registry.get_status()}
        assert models["slack-agent"] == MODEL
        assert models["calendar-agent"] == "ollama:llama3:8b"
