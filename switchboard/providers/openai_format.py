"""
OpenAI Chat Completions Wire Format
===================================

Used for OpenAI itself and for the OpenAI-compatible local servers
(LMStudio, Ollama).

Tool threading in this format:

    {"role": "assistant", "content": "...", "tool_calls": [
        {"id": "call_1", "type": "function",
         "function": {"name": "web_search", "arguments": "{\"query\": \"...\"}"}}
    ]}
    {"role": "tool", "tool_call_id": "call_1", "content": "..."}

Each tool result is its own `tool`-role turn, linked to its call by the
top-level `tool_call_id`. System prompts stay inline as `system` turns.
Arguments travel as a JSON string.

The wire content of a failed tool result is "Error: <message>", which is
also how from_wire_messages() recognizes a failure on the way back. A
successful output that happens to start with "Error: " (or with the escape
character itself) is sent with a leading zero-width space, so the two never
collide and the model still reads the output unchanged.
"""

import json
from typing import Any, AsyncIterator

from switchboard.providers.schema import to_wire_schema
from switchboard.tools import MCPTool
from switchboard.types import (
    CompletionResponse,
    FinishReason,
    Message,
    MessageRole,
    ToolCall,
    ToolResult,
    Usage,
)
from switchboard.utils.logger import Logger

logger = Logger("OpenAIFormat")

_ERROR_PREFIX = "Error: "
_ESCAPE = "\u200b"

_FINISH_REASONS = {
    "stop": FinishReason.STOP,
    "tool_calls": FinishReason.TOOL_CALLS,
    "function_call": FinishReason.TOOL_CALLS,
    "length": FinishReason.LENGTH,
    "content_filter": FinishReason.ERROR,
}


# ==============================================================================
# Messages
# ==============================================================================

def to_wire_messages(messages: list[Message]) -> list[dict]:
    """
    Convert internal messages to Chat Completions messages.

    Args:
        messages: Conversation in internal form

    Returns:
        List of message dicts ready for the API
    """
    wire = []

    for msg in messages:
        if msg.role == MessageRole.TOOL:
            result = msg.tool_result
            wire.append({
                "role": "tool",
                "tool_call_id": result.tool_call_id,
                "content": _tool_content(result),
            })
        elif msg.role == MessageRole.ASSISTANT and msg.tool_calls:
            wire.append({
                "role": "assistant",
                "content": msg.content or None,
                "tool_calls": [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {
                            "name": tc.name,
                            "arguments": json.dumps(tc.arguments),
                        },
                    }
                    for tc in msg.tool_calls
                ],
            })
        else:
            wire.append({"role": msg.role.value, "content": msg.content})

    return wire


def _tool_content(result: ToolResult) -> Any:
    content = result.to_message()
    collides = isinstance(content, str) and content.startswith((_ERROR_PREFIX, _ESCAPE))
    if result.success and collides:
        return _ESCAPE + content
    return content


def from_wire_messages(wire: list[dict]) -> list[Message]:
    """
    Convert Chat Completions messages back to internal messages.

    Args:
        wire: Message dicts in Chat Completions form

    Returns:
        The conversation in internal form
    """
    messages = []

    for item in wire:
        role = item["role"]
        content = item.get("content") or ""

        if role == "tool":
            call_id = item.get("tool_call_id", "")
            if content.startswith(_ESCAPE):
                result = ToolResult.ok(content[len(_ESCAPE):], tool_call_id=call_id)
            elif content.startswith(_ERROR_PREFIX):
                result = ToolResult.fail(content[len(_ERROR_PREFIX):], tool_call_id=call_id)
            else:
                result = ToolResult.ok(content, tool_call_id=call_id)
            messages.append(Message.tool(result))
        elif role == "assistant" and item.get("tool_calls"):
            messages.append(Message.assistant(
                content,
                tool_calls=[_parse_tool_call(tc) for tc in item["tool_calls"]],
            ))
        else:
            messages.append(Message(role=role, content=content))

    return messages


def _parse_tool_call(raw: Any) -> ToolCall:
    """Parse one tool call from a dict or an SDK object."""
    if isinstance(raw, dict):
        call_id = raw["id"]
        name = raw["function"]["name"]
        arguments = raw["function"].get("arguments") or "{}"
    else:
        call_id = raw.id
        name = raw.function.name
        arguments = raw.function.arguments or "{}"

    try:
        parsed = json.loads(arguments) if isinstance(arguments, str) else dict(arguments)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse arguments for tool call {call_id} ({name})", e)
        parsed = {}

    if not isinstance(parsed, dict):
        logger.warning(f"Tool call {call_id} ({name}) arguments are not an object")
        parsed = {}

    return ToolCall(id=call_id, name=name, arguments=parsed)


# ==============================================================================
# Tools
# ==============================================================================

def tools_to_wire(tools: list[MCPTool]) -> list[dict]:
    """Declare tools in OpenAI function-calling format."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": to_wire_schema(tool.parameters),
            },
        }
        for tool in tools
    ]


# ==============================================================================
# Requests & Responses
# ==============================================================================

def build_request(
    model_name: str,
    messages: list[Message],
    tools: list[MCPTool] | None,
    max_tokens: int,
    temperature: float
) -> dict:
    """Build keyword arguments for chat.completions.create()."""
    request = {
        "model": model_name,
        "messages": to_wire_messages(messages),
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if tools:
        request["tools"] = tools_to_wire(tools)
    return request


def parse_response(response: Any) -> CompletionResponse:
    """
    Normalize a ChatCompletion into a CompletionResponse.

    Args:
        response: The SDK ChatCompletion object

    Returns:
        Content, tool calls, usage and finish reason in internal form
    """
    choice = response.choices[0]
    message = choice.message

    tool_calls = [_parse_tool_call(tc) for tc in (message.tool_calls or [])]

    usage = None
    if getattr(response, "usage", None):
        usage = Usage(
            prompt_tokens=response.usage.prompt_tokens or 0,
            completion_tokens=response.usage.completion_tokens or 0,
            total_tokens=response.usage.total_tokens or 0,
        )

    finish_reason = _FINISH_REASONS.get(choice.finish_reason, FinishReason.STOP)
    if tool_calls:
        finish_reason = FinishReason.TOOL_CALLS

    return CompletionResponse(
        content=message.content or "",
        tool_calls=tool_calls,
        usage=usage,
        finish_reason=finish_reason,
    )


async def complete(client: Any, request: dict) -> CompletionResponse:
    """Run one non-streaming completion."""
    response = await client.chat.completions.create(**request)
    return parse_response(response)


async def stream_text(client: Any, request: dict) -> AsyncIterator[str]:
    """
    Stream text fragments of one completion.

    Tool declarations are not sent; only text is streamed. The response
    stream is closed however iteration ends.
    """
    request = {key: value for key, value in request.items() if key != "tools"}
    stream = await client.chat.completions.create(**request, stream=True)

    try:
        async for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content
    finally:
        await stream.close()
