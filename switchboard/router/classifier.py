"""
Intent Classifier
=================

Decides whether a request is work or personal, and what kind of task it is.

Stages, cheapest first:
    0. Explicit tag ([work] / [personal])     -> confidence 1.0, no model call
    1. Keyword heuristics                     -> accepted when confidence > 0.8
    2. Model classification (JSON reply)      -> validated against
                                                 CLASSIFICATION_SCHEMA

Stage 2 is best effort. No model, a provider error, a reply without a JSON
object, invalid JSON or a reply that fails schema validation all fall back
to the stage 1 result. classify() never raises.
"""

import json

import jsonschema

from switchboard.errors import ParseError
from switchboard.providers import ModelClient
from switchboard.router import heuristics
from switchboard.types import Classification, Message
from switchboard.utils.logger import Logger

logger = Logger("Classifier")

# Heuristic results above this are accepted without asking the model
HEURISTIC_ACCEPT_THRESHOLD = 0.8

CLASSIFY_MAX_TOKENS = 512
CLASSIFY_TEMPERATURE = 0.3


ROUTER_SYSTEM_PROMPT = """You are the router of the Switchboard system. Your role is to understand user requests and help route them to the appropriate specialized agents.

Your personality:
- Warm, intuitive, and helpful
- Concise but personable: say what matters
- You remember context from previous conversations

Your capabilities:
- Classify requests as "work" (professional tasks) or "personal" (life tasks)
- Identify the type of task (coding, email, calendar, research, creative, etc.)
- Determine task priority and urgency
- Route to appropriate specialized agents
- Maintain natural conversation when needed

Work-related keywords: code, PR, pull request, GitHub, repo, deploy, slack, meeting, standup, sprint, jira, documentation, API, bug, feature, review, merge, commit, branch, production, staging, work email, work calendar, project, deadline, client, team, colleague

Personal keywords: personal email, family, friend, mom, dad, vacation, hobby, health, exercise, recipe, entertainment, social media, personal project, home, shopping, travel, appointment, birthday, anniversary, personal calendar

When responding to classification requests, output valid JSON only."""


CLASSIFICATION_PROMPT = """Analyze the following user request and classify it:

User request: "{input}"

Respond with ONLY a valid JSON object in this exact format:
{
  "intent": {
    "type": "work" | "personal" | "unclear",
    "confidence": 0.0 to 1.0,
    "category": "coding" | "github" | "slack" | "email" | "calendar" | "research" | "creative" | "social" | "chat" | "other",
    "suggestedAgent": "agent role name",
    "requiresHumanApproval": true/false,
    "reasoning": "brief explanation"
  },
  "extractedTask": {
    "title": "concise task title",
    "description": "full task description",
    "priority": "low" | "medium" | "high" | "urgent",
    "tools": ["list", "of", "required", "tools"]
  }
}"""


CLASSIFICATION_SCHEMA = {
    "type": "object",
    "properties": {
        "intent": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ["work", "personal", "unclear"]},
                "confidence": {"type": "number", "minimum": 0, "maximum": 1},
                "category": {"type": "string", "minLength": 1},
                "suggestedAgent": {"type": ["string", "null"]},
                "requiresHumanApproval": {"type": "boolean"},
                "reasoning": {"type": "string"}
            },
            "required": ["type", "confidence", "category"]
        },
        "extractedTask": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "description": {"type": "string"},
                "priority": {"type": "string", "enum": ["low", "medium", "high", "urgent"]},
                "tools": {"type": "array", "items": {"type": "string"}}
            },
            "required": ["title", "description", "priority"]
        }
    },
    "required": ["intent", "extractedTask"]
}

_validator = jsonschema.Draft202012Validator(CLASSIFICATION_SCHEMA)


def extract_first_json_object(text: str) -> dict | None:
    """
    Find the first JSON object embedded in free text.

    Scans for balanced braces, ignoring braces inside JSON strings, and
    returns the first candidate that parses as an object.

    Args:
        text: Model reply, possibly with prose or code fences around the JSON

    Returns:
        The parsed object, or None if there is none
    """
    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        if end is None:
            return None

        try:
            value = json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value

        start = text.find("{", start + 1)
    return None


def _matching_brace(text: str, start: int) -> int | None:
    """Index of the brace closing the one at `start`, or None if unbalanced."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def parse_classification(reply: str) -> Classification:
    """
    Parse and validate a model's classification reply.

    Raises:
        ParseError: No JSON object, or the object fails schema validation
    """
    data = extract_first_json_object(reply)
    if data is None:
        raise ParseError("No JSON object in classification reply")

    errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(
            f"{'/'.join(str(p) for p in error.path) or '<root>'}: {error.message}"
            for error in errors
        )
        raise ParseError(f"Classification reply failed validation: {details}")

    return Classification.from_dict(data, source="model")


class IntentClassifier:
    """
    Two-stage classifier with an optional model stage.

    Example:
        classifier = IntentClassifier(client, "anthropic:claude-3-5-sonnet-20241022")
        result = await classifier.classify("[work] review the auth PR")
        print(result.intent.type, result.intent.confidence, result.source)
    """

    def __init__(self, client: ModelClient | None = None, model: str | None = None):
        """
        Initialize the classifier.

        Args:
            client: Model client for the fallback stage
            model: Model id for the fallback stage (None disables it)
        """
        self.client = client
        self.model = model

    async def classify(self, text: str) -> Classification:
        """
        Classify a request.

        Args:
            text: The raw request, tags included

        Returns:
            The classification; `source` tells which stage produced it
        """
        tags, clean = heuristics.extract_tags(text)

        agent_type = heuristics.explicit_type(tags)
        if agent_type is not None:
            return heuristics.explicit_classify(clean, agent_type)

        heuristic = heuristics.heuristic_classify(clean)
        if heuristic.intent.confidence > HEURISTIC_ACCEPT_THRESHOLD:
            return heuristic

        if self.client is None or self.model is None:
            return heuristic

        try:
            response = await self.client.complete(
                model=self.model,
                messages=[
                    Message.system(ROUTER_SYSTEM_PROMPT),
                    Message.user(CLASSIFICATION_PROMPT.replace("{input}", clean)),
                ],
                max_tokens=CLASSIFY_MAX_TOKENS,
                temperature=CLASSIFY_TEMPERATURE,
            )
            classification = parse_classification(response.content)
        except ParseError as e:
            logger.warning(f"Using heuristic classification: {e}")
            return heuristic
        except Exception as e:
            logger.error("Classification request failed, using heuristics", e)
            return heuristic

        if classification.intent.suggested_agent is None:
            classification.intent.suggested_agent = heuristics.category_to_agent(
                classification.intent.category
            )

        logger.debug(
            f"Model classified as {classification.intent.type.value} "
            f"({classification.intent.confidence:.2f}, {classification.intent.category})"
        )
        return classification
