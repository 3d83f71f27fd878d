"""
Anthropic Messages Wire Format
==============================

Tool threading in this format lives in content blocks:

    system="You are ..."                      (out of band, not a turn)
    {"role": "assistant", "content": [
        {"type": "text", "text": "Let me check."},
        {"type": "tool_use", "id": "toolu_1", "name": "web_search",
         "input": {"query": "..."}}
    ]}
    {"role": "user", "content": [
        {"type": "tool_result", "tool_use_id": "toolu_1", "content": "..."}
    ]}

Differences from the OpenAI format handled here:
- system messages are pulled out of the conversation into `system`
  (several are joined with a blank line)
- all results answering one assistant turn go into a single `user` turn
  of `tool_result` blocks, so consecutive tool messages are folded together
- failed results carry `is_error: true`
- arguments travel as a JSON object, not a string
"""

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

_FINISH_REASONS = {
    "end_turn": FinishReason.STOP,
    "stop_sequence": FinishReason.STOP,
    "tool_use": FinishReason.TOOL_CALLS,
    "max_tokens": FinishReason.LENGTH,
    "refusal": FinishReason.ERROR,
}


# ==============================================================================
# Messages
# ==============================================================================

def to_wire_messages(messages: list[Message]) -> tuple[str | None, list[dict]]:
    """
    Convert internal messages to Messages API form.

    Args:
        messages: Conversation in internal form

    Returns:
        Tuple of (system prompt or None, message dicts)
    """
    system_parts = []
    wire: list[dict] = []

    for msg in messages:
        if msg.role == MessageRole.SYSTEM:
            if msg.content:
                system_parts.append(msg.content)
            continue

        if msg.role == MessageRole.TOOL:
            block = _tool_result_block(msg.tool_result)
            if wire and _is_tool_result_turn(wire[-1]):
                wire[-1]["content"].append(block)
            else:
                wire.append({"role": "user", "content": [block]})
            continue

        if msg.role == MessageRole.ASSISTANT and msg.tool_calls:
            content: list[dict] = []
            if msg.content:
                content.append({"type": "text", "text": msg.content})
            for tc in msg.tool_calls:
                content.append({
                    "type": "tool_use",
                    "id": tc.id,
                    "name": tc.name,
                    "input": dict(tc.arguments),
                })
            wire.append({"role": "assistant", "content": content})
            continue

        wire.append({
            "role": "assistant" if msg.role == MessageRole.ASSISTANT else "user",
            "content": msg.content,
        })

    system = "\n\n".join(system_parts) if system_parts else None
    return system, wire


def _tool_result_block(result: ToolResult) -> dict:
    block = {
        "type": "tool_result",
        "tool_use_id": result.tool_call_id,
        "content": result.output if result.success else (result.error or ""),
    }
    if not result.success:
        block["is_error"] = True
    return block


def _is_tool_result_turn(turn: dict) -> bool:
    content = turn.get("content")
    return (
        turn.get("role") == "user"
        and isinstance(content, list)
        and bool(content)
        and all(block.get("type") == "tool_result" for block in content)
    )


def from_wire_messages(system: str | None, wire: list[dict]) -> list[Message]:
    """
    Convert Messages API form back to internal messages.

    A user turn of tool_result blocks becomes one tool message per block.

    Args:
        system: The out-of-band system prompt
        wire: Message dicts in Messages API form

    Returns:
        The conversation in internal form
    """
    messages = []
    if system:
        messages.append(Message.system(system))

    for item in wire:
        role = item["role"]
        content = item["content"]

        if isinstance(content, str):
            messages.append(Message(role=role, content=content))
            continue

        text = "".join(_block_get(b, "text") or "" for b in content if _block_get(b, "type") == "text")

        if role == "assistant":
            tool_calls = [
                ToolCall(
                    id=_block_get(b, "id"),
                    name=_block_get(b, "name"),
                    arguments=dict(_block_get(b, "input") or {}),
                )
                for b in content
                if _block_get(b, "type") == "tool_use"
            ]
            messages.append(Message.assistant(text, tool_calls=tool_calls))
            continue

        for block in content:
            if _block_get(block, "type") != "tool_result":
                continue
            call_id = _block_get(block, "tool_use_id")
            body = _tool_result_text(_block_get(block, "content"))
            if _block_get(block, "is_error"):
                result = ToolResult.fail(body, tool_call_id=call_id)
            else:
                result = ToolResult.ok(body, tool_call_id=call_id)
            messages.append(Message.tool(result))

        if text:
            messages.append(Message.user(text))

    return messages


def _block_get(block: Any, key: str) -> Any:
    """Read a field from a dict block or an SDK block object."""
    if isinstance(block, dict):
        return block.get(key)
    return getattr(block, key, None)


def _tool_result_text(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return "".join(_block_get(b, "text") or "" for b in content)


# ==============================================================================
# Tools
# ==============================================================================

def tools_to_wire(tools: list[MCPTool]) -> list[dict]:
    """Declare tools in Anthropic tool format."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "input_schema": to_wire_schema(tool.parameters),
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
    """Build keyword arguments for messages.create()."""
    system, wire = to_wire_messages(messages)
    request = {
        "model": model_name,
        "messages": wire,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if system:
        request["system"] = system
    if tools:
        request["tools"] = tools_to_wire(tools)
    return request


def parse_response(response: Any) -> CompletionResponse:
    """
    Normalize an Anthropic Message into a CompletionResponse.

    Text blocks are concatenated; tool_use blocks become tool calls in the
    order they appear.
    """
    content = ""
    tool_calls = []

    for block in response.content:
        block_type = _block_get(block, "type")
        if block_type == "text":
            content += _block_get(block, "text") or ""
        elif block_type == "tool_use":
            tool_calls.append(ToolCall(
                id=_block_get(block, "id"),
                name=_block_get(block, "name"),
                arguments=dict(_block_get(block, "input") or {}),
            ))

    usage = None
    if getattr(response, "usage", None):
        input_tokens = response.usage.input_tokens or 0
        output_tokens = response.usage.output_tokens or 0
        usage = Usage(
            prompt_tokens=input_tokens,
            completion_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )

    finish_reason = _FINISH_REASONS.get(response.stop_reason, FinishReason.STOP)
    if tool_calls:
        finish_reason = FinishReason.TOOL_CALLS

    return CompletionResponse(
        content=content,
        tool_calls=tool_calls,
        usage=usage,
        finish_reason=finish_reason,
    )


async def complete(client: Any, request: dict) -> CompletionResponse:
    """Run one non-streaming completion."""
    response = await client.messages.create(**request)
    return parse_response(response)


async def stream_text(client: Any, request: dict) -> AsyncIterator[str]:
    """Stream text fragments of one completion (tools are not sent)."""
    request = {key: value for key, value in request.items() if key != "tools"}

    async with client.messages.stream(**request) as stream:
        async for text in stream.text_stream:
            if text:
                yield text
