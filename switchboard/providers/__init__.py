"""
Providers
=========

Normalizes chat-completion backends behind one contract.

This module provides:
- ModelClient: complete / stream_complete over every configured provider
- ModelCatalog: read-only published model list and model selection
- to_wire_schema: structural tool-schema conversion

Wire formats live in openai_format (OpenAI, LMStudio, Ollama) and
anthropic_format (Anthropic).
"""

from switchboard.providers.catalog import ModelCatalog, capabilities_for, split_model_id
from switchboard.providers.client import ModelClient
from switchboard.providers.schema import to_wire_schema

__all__ = [
    "ModelClient",
    "ModelCatalog",
    "capabilities_for",
    "split_model_id",
    "to_wire_schema",
]
