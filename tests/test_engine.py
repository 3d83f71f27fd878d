"""Unit tests for the bounded tool-calling loop."""

import asyncio

import pytest
from fakes import FakeModelClient, text_response, tool_response

from switchboard.agent import (
    AgentObserver,
    CancellationToken,
    ExecutionEngine,
    RecordingObserver,
    ToolExecutor,
)
from switchboard.errors import InvalidTaskTransition, ProviderTimeoutError
from switchboard.types import (
    AgentType,
    Message,
    MessageRole,
    Task,
    TaskStatus,
    ToolCall,
    Usage,
)

MODEL = "openai:gpt-4o"


@pytest.fixture
def task():
    return Task(title="Check the build", description="Look at CI for acme/api", type=AgentType.WORK)


def make_engine(client, registry, **kwargs):
    return ExecutionEngine(
        client,
        ToolExecutor(registry, timeout=kwargs.pop("tool_timeout", 30.0)),
        "coding-agent",
        "You are the Coding Agent.",
        **kwargs,
    )


class TestCompletion:
    async def test_plain_answer_completes_in_one_iteration(self, task, tool_registry):
        client = FakeModelClient([text_response("All green.", usage=Usage(10, 5, 15))])
        engine = make_engine(client, tool_registry, temperature=0.2, max_tokens=512)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.success
        assert outcome.result.output == "All green."
        assert outcome.result.iterations == 1
        assert task.status == TaskStatus.COMPLETED
        assert task.result is outcome.result

        call = client.calls[0]
        assert call["model"] == MODEL
        assert call["temperature"] == 0.2
        assert call["max_tokens"] == 512
        assert [t.name for t in call["tools"]] == ["echo", "explode", "slow"]

    async def test_opening_messages(self, task, tool_registry):
        client = FakeModelClient([text_response("done")])
        engine = make_engine(client, tool_registry)

        await engine.run(task, MODEL, [])

        messages = client.calls[0]["messages"]
        assert messages[0].role == MessageRole.SYSTEM
        assert messages[0].content == "You are the Coding Agent."
        assert messages[-1].role == MessageRole.USER
        assert messages[-1].content == "Task: Check the build\n\nDescription: Look at CI for acme/api"

    async def test_only_the_history_window_is_sent(self, task, tool_registry):
        history = [Message.user(f"turn {i}") for i in range(15)]
        client = FakeModelClient([text_response("done")])
        engine = make_engine(client, tool_registry, history_window=4)

        await engine.run(task, MODEL, history)

        sent = [m.content for m in client.calls[0]["messages"][1:-1]]
        assert sent == ["turn 11", "turn 12", "turn 13", "turn 14"]
        assert len(history) == 15

    async def test_tool_round_trip(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(
                ToolCall("call_1", "echo", {"text": "one"}),
                ToolCall("call_2", "echo", {"text": "two"}),
                content="Echoing twice.",
            ),
            text_response("Echoed both."),
        ])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.output == "Echoed both."
        assert outcome.result.iterations == 2

        second = client.calls[1]["messages"]
        assistant, first_result, second_result = second[-3:]
        assert assistant.role == MessageRole.ASSISTANT
        assert [tc.id for tc in assistant.tool_calls] == ["call_1", "call_2"]
        assert first_result.tool_result.tool_call_id == "call_1"
        assert first_result.content == "echo: one"
        assert second_result.content == "echo: two"

    async def test_transcript_starts_at_the_task_turn(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "echo", {"text": "x"})),
            text_response("done"),
        ])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [Message.user("earlier")])

        roles = [m.role for m in outcome.transcript]
        assert roles == [
            MessageRole.USER, MessageRole.ASSISTANT, MessageRole.TOOL, MessageRole.ASSISTANT
        ]
        assert outcome.transcript[-1].content == "done"

    async def test_usage_is_summed_over_iterations(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "echo", {"text": "x"}), usage=Usage(100, 20, 120)),
            text_response("done", usage=Usage(150, 30, 180)),
        ])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.usage == Usage(250, 50, 300)


class TestContainedToolFailures:
    async def test_unknown_tool_keeps_the_loop_going(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "teleport", {})),
            text_response("I could not teleport."),
        ])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.success
        failed = client.calls[1]["messages"][-1]
        assert failed.tool_result.success is False
        assert failed.content == "Unknown tool: teleport"

    async def test_raising_tool_is_reported_to_the_model(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "explode", {})),
            text_response("The tool broke."),
        ])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.success
        failed = client.calls[1]["messages"][-1]
        assert failed.tool_result.success is False
        assert "disk on fire" in failed.content

    async def test_tool_timeout_is_contained(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "slow", {})),
            text_response("Gave up waiting."),
        ])
        engine = make_engine(client, tool_registry, tool_timeout=0.05)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.success
        assert "timed out" in client.calls[1]["messages"][-1].content


class TestFailures:
    async def test_iteration_cap(self, task, tool_registry):
        client = FakeModelClient([
            tool_response(ToolCall(f"call_{i}", "echo", {"text": "again"})) for i in range(5)
        ])
        engine = make_engine(client, tool_registry, max_iterations=3)

        outcome = await engine.run(task, MODEL, [])

        assert len(client.calls) == 3
        assert not outcome.result.success
        assert outcome.result.error_kind == "max_iterations_exceeded"
        assert outcome.result.iterations == 3
        assert task.status == TaskStatus.FAILED

    def test_cap_must_be_positive(self, tool_registry):
        with pytest.raises(ValueError):
            make_engine(FakeModelClient(), tool_registry, max_iterations=0)

    async def test_no_model_is_a_configuration_error(self, task, tool_registry):
        client = FakeModelClient()
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, None, [])

        assert outcome.result.error_kind == "configuration_error"
        assert client.calls == []

    async def test_backend_exception_becomes_provider_error(self, task, tool_registry):
        client = FakeModelClient([ConnectionError("connection reset")])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.error_kind == "provider_error"
        assert outcome.result.error == "connection reset"
        assert task.status == TaskStatus.FAILED

    async def test_provider_timeout_keeps_its_message(self, task, tool_registry):
        client = FakeModelClient([ProviderTimeoutError("openai", 60)])
        engine = make_engine(client, tool_registry)

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.error_kind == "provider_error"
        assert outcome.result.error == "openai call timed out after 60s"

    async def test_finished_task_cannot_run_again(self, task, tool_registry):
        engine = make_engine(FakeModelClient([text_response("done")]), tool_registry)
        await engine.run(task, MODEL, [])

        with pytest.raises(InvalidTaskTransition):
            await engine.run(task, MODEL, [])


class TestCancellation:
    async def test_cancelled_before_start(self, task, tool_registry):
        client = FakeModelClient([text_response("never")])
        engine = make_engine(client, tool_registry)
        token = CancellationToken()
        token.cancel("User changed their mind")

        outcome = await engine.run(task, MODEL, [], cancel=token)

        assert client.calls == []
        assert outcome.result.error_kind == "cancelled"
        assert outcome.result.error == "User changed their mind"
        assert task.status == TaskStatus.FAILED

    async def test_cancelled_between_tool_calls(self, task, tool_registry):
        token = CancellationToken()

        class CancelAfterFirstResult(AgentObserver):
            def on_tool_result(self, agent_id, result):
                token.cancel()

        client = FakeModelClient([
            tool_response(
                ToolCall("call_1", "echo", {"text": "one"}),
                ToolCall("call_2", "echo", {"text": "two"}),
            ),
        ])
        engine = make_engine(client, tool_registry, observer=CancelAfterFirstResult())

        outcome = await engine.run(task, MODEL, [], cancel=token)

        assert outcome.result.error_kind == "cancelled"
        assert outcome.result.iterations == 1
        assert len(client.calls) == 1

        # The call that ran stays in the transcript, the skipped one does not
        transcript = outcome.transcript
        assert [m.role for m in transcript] == [
            MessageRole.USER, MessageRole.ASSISTANT, MessageRole.TOOL
        ]
        assert [c.id for c in transcript[1].tool_calls] == ["call_1"]
        assert transcript[2].tool_result.tool_call_id == "call_1"
        assert transcript[2].content == "echo: one"

    async def test_task_cancellation_fails_the_task_and_propagates(self, task, tool_registry):
        started = asyncio.Event()

        async def hang():
            started.set()
            await asyncio.sleep(5)

        engine = make_engine(FakeModelClient([hang]), tool_registry)
        run = asyncio.create_task(engine.run(task, MODEL, []))
        await started.wait()
        run.cancel()

        with pytest.raises(asyncio.CancelledError):
            await run

        assert task.status == TaskStatus.FAILED
        assert task.result.error_kind == "cancelled"


class TestObservers:
    async def test_hooks_fire_in_order(self, task, tool_registry):
        observer = RecordingObserver()
        client = FakeModelClient([
            tool_response(ToolCall("call_1", "echo", {"text": "x"})),
            text_response("done"),
        ])
        engine = make_engine(client, tool_registry, observer=observer)

        await engine.run(task, MODEL, [])

        assert observer.names() == [
            "started", "thinking", "tool_call", "tool_result", "thinking", "completed"
        ]

    async def test_failure_hook_reports_the_error_type(self, task, tool_registry):
        observer = RecordingObserver()
        engine = make_engine(FakeModelClient(), tool_registry, observer=observer)

        await engine.run(task, None, [])

        assert observer.events[-1] == ("failed", "ConfigurationError")

    async def test_raising_observer_does_not_break_the_task(self, task, tool_registry):
        class Broken(AgentObserver):
            def on_thinking(self, agent_id, iteration):
                raise RuntimeError("observer bug")

        engine = make_engine(
            FakeModelClient([text_response("done")]), tool_registry, observer=Broken()
        )

        outcome = await engine.run(task, MODEL, [])

        assert outcome.result.success
