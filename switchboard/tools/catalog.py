"""
Stub Tool Catalog
=================

The tool sets each agent role is built with.

Every tool here is a stand-in: it accepts the arguments a real integration
would take (GitHub, the file system, Slack, email, web search, calendar,
social media) and returns a "[Mock] ..." description of what it would have
done. The schemas are real, so argument validation and the tool-calling
loop behave exactly as they would against live integrations.

Role -> tools:
    github    list_pull_requests, get_pr_details
    coding    read_file, write_file
    slack     send_message
    email     read_emails, send_email
    research  web_search
    calendar  list_events, create_event
    social    draft_post
    creative  (none, pure generation)
    chat      (none, pure conversation)
"""

from switchboard.tools import MCPTool, ToolRegistry
from switchboard.types import ToolResult
from switchboard.utils.logger import Logger

logger = Logger("ToolCatalog")


# ==============================================================================
# GitHub
# ==============================================================================

async def _list_pull_requests(params: dict) -> ToolResult:
    state = params.get("state", "open")
    return ToolResult.ok(f"[Mock] Listed PRs for {params['repo']} with state: {state}")


async def _get_pr_details(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] PR #{params['pr_number']} details for {params['repo']}")


list_pull_requests_tool = MCPTool(
    name="list_pull_requests",
    description="List pull requests in a repository",
    parameters={
        "type": "object",
        "properties": {
            "repo": {
                "type": "string",
                "description": "Repository name (owner/repo format)"
            },
            "state": {
                "type": "string",
                "enum": ["open", "closed", "all"],
                "description": "Pull request state filter"
            }
        },
        "required": ["repo"]
    },
    execute=_list_pull_requests
)

get_pr_details_tool = MCPTool(
    name="get_pr_details",
    description="Get details of a specific pull request",
    parameters={
        "type": "object",
        "properties": {
            "repo": {"type": "string", "description": "Repository name"},
            "pr_number": {"type": "integer", "description": "Pull request number"}
        },
        "required": ["repo", "pr_number"]
    },
    execute=_get_pr_details
)


# ==============================================================================
# Coding
# ==============================================================================

async def _read_file(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Read file: {params['path']}")


async def _write_file(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Wrote to file: {params['path']}")


read_file_tool = MCPTool(
    name="read_file",
    description="Read contents of a file",
    parameters={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "File path to read"}
        },
        "required": ["path"]
    },
    execute=_read_file
)

write_file_tool = MCPTool(
    name="write_file",
    description="Write contents to a file",
    parameters={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "File path to write"},
            "content": {"type": "string", "description": "Content to write"}
        },
        "required": ["path", "content"]
    },
    execute=_write_file
)


# ==============================================================================
# Slack
# ==============================================================================

async def _send_message(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Sent message to {params['channel']}")


send_message_tool = MCPTool(
    name="send_message",
    description="Send a message to a Slack channel or user",
    parameters={
        "type": "object",
        "properties": {
            "channel": {"type": "string", "description": "Channel name or user ID"},
            "message": {"type": "string", "description": "Message to send"}
        },
        "required": ["channel", "message"]
    },
    execute=_send_message
)


# ==============================================================================
# Email
# ==============================================================================

async def _read_emails(params: dict) -> ToolResult:
    limit = params.get("limit") or 10
    scope = "unread " if params.get("unread_only") else ""
    return ToolResult.ok(f"[Mock] Read {limit} {scope}emails")


async def _send_email(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Sent email to {params['to']}")


read_emails_tool = MCPTool(
    name="read_emails",
    description="Read recent emails",
    parameters={
        "type": "object",
        "properties": {
            "limit": {"type": "integer", "description": "Number of emails to read"},
            "unread_only": {"type": "boolean", "description": "Only unread emails"}
        },
        "required": []
    },
    execute=_read_emails
)

send_email_tool = MCPTool(
    name="send_email",
    description="Send an email",
    parameters={
        "type": "object",
        "properties": {
            "to": {"type": "string", "description": "Recipient email"},
            "subject": {"type": "string", "description": "Email subject"},
            "body": {"type": "string", "description": "Email body"}
        },
        "required": ["to", "subject", "body"]
    },
    execute=_send_email
)


# ==============================================================================
# Research
# ==============================================================================

async def _web_search(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Search results for: {params['query']}")


web_search_tool = MCPTool(
    name="web_search",
    description="Search the web for information",
    parameters={
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query"},
            "num_results": {"type": "integer", "description": "Number of results"}
        },
        "required": ["query"]
    },
    execute=_web_search
)


# ==============================================================================
# Calendar
# ==============================================================================

async def _list_events(params: dict) -> ToolResult:
    days = params.get("days") or 7
    return ToolResult.ok(f"[Mock] Listed events for next {days} days")


async def _create_event(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Created event: {params['title']}")


list_events_tool = MCPTool(
    name="list_events",
    description="List upcoming calendar events",
    parameters={
        "type": "object",
        "properties": {
            "days": {"type": "integer", "description": "Number of days to look ahead"}
        },
        "required": []
    },
    execute=_list_events
)

create_event_tool = MCPTool(
    name="create_event",
    description="Create a calendar event",
    parameters={
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Event title"},
            "start": {"type": "string", "description": "Start time (ISO format)"},
            "end": {"type": "string", "description": "End time (ISO format)"},
            "description": {"type": "string", "description": "Event description"}
        },
        "required": ["title", "start", "end"]
    },
    execute=_create_event
)


# ==============================================================================
# Social
# ==============================================================================

async def _draft_post(params: dict) -> ToolResult:
    return ToolResult.ok(f"[Mock] Drafted {params['platform']} post about: {params['topic']}")


draft_post_tool = MCPTool(
    name="draft_post",
    description="Draft a social media post",
    parameters={
        "type": "object",
        "properties": {
            "platform": {
                "type": "string",
                "enum": ["twitter", "linkedin", "instagram", "facebook"]
            },
            "topic": {"type": "string", "description": "Post topic or theme"},
            "tone": {"type": "string", "description": "Desired tone"}
        },
        "required": ["platform", "topic"]
    },
    execute=_draft_post
)


# ==============================================================================
# Role tool sets
# ==============================================================================

TOOLS_BY_ROLE: dict[str, list[MCPTool]] = {
    "github": [list_pull_requests_tool, get_pr_details_tool],
    "coding": [read_file_tool, write_file_tool],
    "slack": [send_message_tool],
    "email": [read_emails_tool, send_email_tool],
    "research": [web_search_tool],
    "calendar": [list_events_tool, create_event_tool],
    "creative": [],
    "chat": [],
    "social": [draft_post_tool],
}


def build_registry(role: str) -> ToolRegistry:
    """
    Build a fresh tool registry for an agent role.

    Args:
        role: Agent role (unknown roles get an empty registry)

    Returns:
        A new ToolRegistry owned by the caller
    """
    tools = TOOLS_BY_ROLE.get(role, [])
    if role not in TOOLS_BY_ROLE:
        logger.warning(f"No tool set for role '{role}', using none")

    registry = ToolRegistry(tools)
    logger.debug(f"Built registry for {role}: {registry.list_names()}")
    return registry
