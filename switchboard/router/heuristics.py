"""
Routing Heuristics
==================

Keyword rules that classify a request without a model.

Stage 0, explicit tags:
    "[work] review the auth PR"    -> work, confidence 1.0
    "[personal] plan my weekend"   -> personal, confidence 1.0

Stage 1, indicator counts:
    w = work indicators found, p = personal indicators found
    type       = work if w > p, personal if p > w, else unclear
    confidence = min(0.9, 0.5 + 0.4 * |w - p| / max(w + p, 1))

Matching is case-insensitive substring matching, so short indicators like
"pr" also match inside longer words. Category, priority, title and tool
hints are derived the same way for every stage.
"""

import re

from switchboard.types import (
    AgentType,
    Classification,
    ExtractedTask,
    Intent,
    IntentType,
    TaskPriority,
)

# ==============================================================================
# Rule tables
# ==============================================================================

WORK_INDICATORS = [
    "pr", "pull request", "github", "code", "deploy", "slack",
    "meeting", "standup", "sprint", "jira", "documentation",
    "api", "bug", "feature", "review", "merge", "commit",
    "branch", "production", "staging", "project", "deadline",
    "client", "team", "colleague", "work email", "work calendar",
]

PERSONAL_INDICATORS = [
    "personal", "family", "friend", "mom", "dad", "vacation",
    "hobby", "health", "exercise", "recipe", "entertainment",
    "social media", "home", "shopping", "travel", "birthday",
    "anniversary", "personal calendar", "personal email",
]

# First match wins
CATEGORY_RULES: list[tuple[str, re.Pattern]] = [
    ("github", re.compile(r"github|pr|pull request|merge|commit|branch|repo")),
    ("coding", re.compile(r"code|implement|fix|bug|feature|refactor|debug")),
    ("slack", re.compile(r"slack|message|channel|team")),
    ("email", re.compile(r"email|mail|send|reply")),
    ("calendar", re.compile(r"calendar|schedule|meeting|appointment")),
    ("research", re.compile(r"search|research|find|look up")),
    ("creative", re.compile(r"write|create|draft|compose|blog|post")),
    ("social", re.compile(r"social|twitter|linkedin|instagram|post")),
]
DEFAULT_CATEGORY = "chat"

CATEGORY_AGENTS = {
    "github": "github",
    "coding": "coding",
    "slack": "slack",
    "email": "email",
    "calendar": "calendar",
    "research": "research",
    "creative": "creative",
    "social": "social",
    "chat": "chat",
}

PRIORITY_RULES: list[tuple[TaskPriority, re.Pattern]] = [
    (TaskPriority.URGENT, re.compile(r"urgent|asap|immediately|critical|emergency")),
    (TaskPriority.HIGH, re.compile(r"important|priority|soon|today")),
    (TaskPriority.LOW, re.compile(r"when you can|whenever|low priority")),
]

CATEGORY_TOOLS = {
    "github": ["github_api", "git"],
    "coding": ["file_system", "shell", "code_edit"],
    "slack": ["slack_api"],
    "email": ["gmail_api"],
    "calendar": ["calendar_api"],
    "research": ["web_search"],
    "creative": ["text_generation"],
    "social": ["social_media_api"],
    "chat": [],
}

TAG_PATTERN = re.compile(r"\[([^\]]+)\]")
TITLE_LIMIT = 50


# ==============================================================================
# Tags
# ==============================================================================

def extract_tags(text: str) -> tuple[list[str], str]:
    """
    Pull bracketed tags out of a request.

    Returns:
        (lower-cased tags in order, text with the tags removed and stripped)
    """
    tags = [tag.lower() for tag in TAG_PATTERN.findall(text)]
    clean = TAG_PATTERN.sub("", text).strip()
    return tags, clean


def explicit_type(tags: list[str]) -> AgentType | None:
    """[work] wins over [personal] when both are present."""
    if "work" in tags:
        return AgentType.WORK
    if "personal" in tags:
        return AgentType.PERSONAL
    return None


# ==============================================================================
# Derived fields
# ==============================================================================

def count_indicators(text: str) -> tuple[int, int]:
    """Number of work and personal indicators found in the text."""
    lowered = text.lower()
    work = sum(1 for indicator in WORK_INDICATORS if indicator in lowered)
    personal = sum(1 for indicator in PERSONAL_INDICATORS if indicator in lowered)
    return work, personal


def detect_category(text: str) -> str:
    lowered = text.lower()
    for category, pattern in CATEGORY_RULES:
        if pattern.search(lowered):
            return category
    return DEFAULT_CATEGORY


def category_to_agent(category: str) -> str:
    return CATEGORY_AGENTS.get(category, "chat")


def detect_priority(text: str) -> TaskPriority:
    lowered = text.lower()
    for priority, pattern in PRIORITY_RULES:
        if pattern.search(lowered):
            return priority
    return TaskPriority.MEDIUM


def extract_title(text: str) -> str:
    """First sentence if it is short enough, else a truncated prefix."""
    first_sentence = re.split(r"[.!?]", text, maxsplit=1)[0]
    if len(first_sentence) <= TITLE_LIMIT:
        return first_sentence
    return text[:TITLE_LIMIT - 3] + "..."


def detect_tools(category: str) -> list[str]:
    return list(CATEGORY_TOOLS.get(category, []))


def _extracted_task(text: str, category: str) -> ExtractedTask:
    return ExtractedTask(
        title=extract_title(text),
        description=text,
        priority=detect_priority(text),
        tools=detect_tools(category),
    )


# ==============================================================================
# Classification
# ==============================================================================

def explicit_classify(text: str, agent_type: AgentType) -> Classification:
    """Classification for a request tagged [work] or [personal]."""
    agent_type = AgentType(agent_type)
    category = detect_category(text)

    return Classification(
        intent=Intent(
            type=IntentType(agent_type.value),
            confidence=1.0,
            category=category,
            suggested_agent=category_to_agent(category),
            reasoning=f"Explicitly marked as {agent_type.value}",
        ),
        extracted_task=_extracted_task(text, category),
        source="explicit",
    )


def heuristic_classify(text: str) -> Classification:
    """Classification from indicator counts."""
    work, personal = count_indicators(text)

    if work > personal:
        intent_type = IntentType.WORK
    elif personal > work:
        intent_type = IntentType.PERSONAL
    else:
        intent_type = IntentType.UNCLEAR

    margin = abs(work - personal) / max(work + personal, 1)
    category = detect_category(text)

    return Classification(
        intent=Intent(
            type=intent_type,
            confidence=min(0.9, 0.5 + margin * 0.4),
            category=category,
            suggested_agent=category_to_agent(category),
            reasoning=(
                f"Heuristic classification: {work} work indicators, "
                f"{personal} personal indicators"
            ),
        ),
        extracted_task=_extracted_task(text, category),
        source="heuristic",
    )
