"""
Router
======

Turns a free-text request into either a direct reply or a pending task.

    text
     │
     ├─ untagged small talk ("hi", "bye")   ──► short chat reply, no task
     │
     ▼
    IntentClassifier
     │
     ├─ unclear and confidence < 0.5        ──► clarification question, no task
     │
     ▼
    Task (pending) ──► journal, active_task preference ──► delegation reply

Every request and every reply is written to the memory journal. Running the
task is the agent registry's job, not the router's.
"""

import random
import re
from dataclasses import dataclass

from switchboard.memory import MemoryJournal
from switchboard.providers import ModelClient
from switchboard.router import heuristics
from switchboard.router.classifier import ROUTER_SYSTEM_PROMPT, IntentClassifier
from switchboard.types import (
    AgentType,
    Classification,
    IntentType,
    Message,
    Task,
    TaskPriority,
)
from switchboard.utils.logger import Logger

logger = Logger("Router")

SMALL_TALK_PATTERNS = [
    re.compile(r"(hi|hello|hey|howdy|greetings)( there| all| everyone)?", re.IGNORECASE),
    re.compile(r"how are you( doing)?( today)?", re.IGNORECASE),
    re.compile(r"what('s| is) up", re.IGNORECASE),
    re.compile(r"good (morning|afternoon|evening)", re.IGNORECASE),
    re.compile(r"thanks?( you)?( so much| a lot)?", re.IGNORECASE),
    re.compile(r"(bye|goodbye|see you|later)", re.IGNORECASE),
]

CHAT_MAX_TOKENS = 256
CHAT_TEMPERATURE = 0.8
CHAT_CONTEXT_MESSAGES = 6

CLARIFY_BELOW = 0.5

OFFLINE_GREETING = (
    "Hello! I'm running in limited mode without a model connection. "
    "How can I help you today?"
)
FALLBACK_GREETING = "Hello! What can I help you with today?"

PRIORITY_MARKERS = {
    TaskPriority.URGENT: "🚨",
    TaskPriority.HIGH: "⚡",
    TaskPriority.MEDIUM: "📋",
    TaskPriority.LOW: "📝",
}

DELEGATION_TEMPLATES = [
    "Got it! I'll have the {agent_type} {agent} agent handle this. {marker}",
    "Understood. Routing this to the {agent} agent. {marker}",
    'On it! The {agent} agent will take care of "{title}". {marker}',
]


@dataclass
class RouteOutcome:
    """
    Result of routing one request.

    Attributes:
        response: Text to show the user
        task: The created task (None for small talk and clarifications)
        classification: How the request was classified (None for small talk)
    """
    response: str
    task: Task | None = None
    classification: Classification | None = None

    @property
    def needs_clarification(self) -> bool:
        return self.task is None and self.classification is not None


def is_small_talk(text: str) -> bool:
    """True only when the whole message is a greeting, thanks or farewell."""
    stripped = text.strip().rstrip("!.?,~ ").strip()
    return any(pattern.fullmatch(stripped) for pattern in SMALL_TALK_PATTERNS)


def clarification_message(text: str) -> str:
    return (
        "I want to make sure I understand correctly. Are you asking about "
        "something for work or is this personal?\n\n"
        "You can help me by:\n"
        "- Tagging your request with [work] or [personal]\n"
        "- Being more specific about the context\n\n"
        f'What you said: "{text}"'
    )


def create_task(classification: Classification) -> Task:
    """Pending task from a classification; unclear intents become work tasks."""
    intent = classification.intent
    extracted = classification.extracted_task
    task_type = AgentType.WORK if intent.type == IntentType.UNCLEAR else AgentType(intent.type.value)

    return Task(
        title=extracted.title,
        description=extracted.description,
        type=task_type,
        priority=extracted.priority,
        metadata={
            "category": intent.category,
            "confidence": intent.confidence,
            "tools": list(extracted.tools),
        },
    )


def delegation_message(
    classification: Classification,
    task: Task,
    rng: random.Random | None = None
) -> str:
    template = (rng or random).choice(DELEGATION_TEMPLATES)
    return template.format(
        agent_type=task.type.value,
        agent=classification.intent.suggested_agent or "general",
        title=task.title,
        marker=PRIORITY_MARKERS[task.priority],
    )


class Router:
    """
    Front door for user requests.

    Example:
        router = Router(journal, classifier, client, "openai:gpt-4o")
        outcome = await router.route("[work] review the auth PR today")

        print(outcome.response)
        if outcome.task:
            await registry.execute_task(outcome.task)
    """

    def __init__(
        self,
        journal: MemoryJournal,
        classifier: IntentClassifier,
        client: ModelClient | None = None,
        model: str | None = None,
        rng: random.Random | None = None
    ):
        """
        Initialize the router.

        Args:
            journal: Memory journal for messages, tasks and preferences
            classifier: Intent classifier
            client: Model client for small-talk replies
            model: Model id for small-talk replies (None uses canned replies)
            rng: Random source for picking reply wording
        """
        self.journal = journal
        self.classifier = classifier
        self.client = client
        self.model = model
        self.rng = rng or random.Random()

    async def route(self, text: str) -> RouteOutcome:
        """
        Route one request.

        Args:
            text: The user's request, optionally tagged [work] or [personal]

        Returns:
            RouteOutcome with the reply and, when one was created, the task
        """
        self.journal.add_message(Message.user(text))
        tags, clean = heuristics.extract_tags(text)

        # An explicit [work] or [personal] tag always means a task
        if heuristics.explicit_type(tags) is None and is_small_talk(clean):
            response = await self.chat()
            self._reply(response)
            return RouteOutcome(response=response)

        classification = await self.classifier.classify(text)
        intent = classification.intent
        logger.info(
            f"Classified as {intent.type.value}/{intent.category} "
            f"({intent.confidence:.2f}, {classification.source})"
        )

        if intent.type == IntentType.UNCLEAR and intent.confidence < CLARIFY_BELOW:
            response = clarification_message(clean)
            self._reply(response)
            return RouteOutcome(response=response, classification=classification)

        task = create_task(classification)
        self.journal.store_task(task)
        self.journal.set_preference("active_task", task.id)

        response = delegation_message(classification, task, self.rng)
        self._reply(response)
        logger.debug(f"Created task {task.id}: {task.title}")

        return RouteOutcome(response=response, task=task, classification=classification)

    async def chat(self) -> str:
        """
        Short conversational reply using the recent conversation.

        Never raises: without a model, or when the call fails, a canned
        greeting is returned.
        """
        if self.client is None or self.model is None:
            return OFFLINE_GREETING

        messages = [
            Message.system(ROUTER_SYSTEM_PROMPT),
            *self.journal.get_recent_messages(CHAT_CONTEXT_MESSAGES),
        ]

        try:
            response = await self.client.complete(
                model=self.model,
                messages=messages,
                max_tokens=CHAT_MAX_TOKENS,
                temperature=CHAT_TEMPERATURE,
            )
        except Exception as e:
            logger.error("Chat reply failed", e)
            return FALLBACK_GREETING

        return response.content or FALLBACK_GREETING

    def _reply(self, content: str) -> None:
        self.journal.add_message(Message.assistant(content))
