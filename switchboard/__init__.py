"""
Switchboard - Routing Requests to LLM Agents
============================================

Free-text requests are classified as work or personal, turned into tasks
and executed by specialized agents, each running a bounded tool-calling
loop against OpenAI-style or Anthropic-style chat models.

This package provides:
- Provider adapter normalizing OpenAI and Anthropic completions
- Execution engine with tool validation, timeouts and cancellation
- Two-stage intent classifier and router
- Agent registry with one agent per role
- Memory journal interface with an in-memory implementation
"""

__version__ = "1.0.0"
