"""
Agent System
============

Agents execute routed tasks. Each agent:
1. Receives a task from the registry
2. Builds the conversation (system prompt, recent history, task)
3. Runs the bounded tool-calling loop against its model
4. Returns a TaskResult

This module provides:
- Agent: One agent, specialized by an AgentProfile
- AgentRegistry: One agent per role, task dispatch
- ExecutionEngine: The tool-calling loop
- ToolExecutor: Runs individual tool calls
- CancellationToken: Cooperative task cancellation
- AgentObserver: Progress notifications
"""

from switchboard.agent.core import Agent, AgentState
from switchboard.agent.engine import CancellationToken, ExecutionEngine, ExecutionOutcome
from switchboard.agent.observer import AgentObserver, LoggingObserver, RecordingObserver
from switchboard.agent.profiles import DEFAULT_PROFILES, AgentProfile
from switchboard.agent.registry import AgentRegistry
from switchboard.agent.tools_executor import ToolExecutor

__all__ = [
    "Agent",
    "AgentState",
    "AgentProfile",
    "AgentRegistry",
    "AgentObserver",
    "LoggingObserver",
    "RecordingObserver",
    "CancellationToken",
    "ExecutionEngine",
    "ExecutionOutcome",
    "ToolExecutor",
    "DEFAULT_PROFILES",
]
