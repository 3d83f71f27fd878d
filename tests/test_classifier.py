"""Unit tests for routing heuristics and the intent classifier."""

import json

import pytest
from fakes import FakeModelClient, text_response

from switchboard.errors import ParseError
from switchboard.router import IntentClassifier, extract_first_json_object
from switchboard.router import heuristics
from switchboard.router.classifier import parse_classification
from switchboard.types import IntentType, TaskPriority

MODEL = "anthropic:claude-3-5-sonnet-20241022"

# No work or personal indicators, so the heuristic stage is unsure (0.5)
AMBIGUOUS = "help me think about something"


def classification_json(**intent_overrides):
    intent = {
        "type": "personal",
        "confidence": 0.85,
        "category": "creative",
        "suggestedAgent": "creative",
        "requiresHumanApproval": False,
        "reasoning": "Sounds like a writing exercise",
    }
    intent.update(intent_overrides)
    return json.dumps({
        "intent": intent,
        "extractedTask": {
            "title": "Brainstorm",
            "description": AMBIGUOUS,
            "priority": "low",
            "tools": ["text_generation"],
        },
    })


class TestHeuristics:
    def test_tags_are_extracted_and_stripped(self):
        tags, clean = heuristics.extract_tags("[Work] review the [urgent] auth PR")

        assert tags == ["work", "urgent"]
        assert clean == "review the  auth PR"

    def test_work_tag_wins(self):
        assert heuristics.explicit_type(["personal", "work"]).value == "work"
        assert heuristics.explicit_type(["urgent"]) is None

    def test_clear_work_request(self):
        result = heuristics.heuristic_classify("deploy the api to staging")

        assert result.intent.type == IntentType.WORK
        assert result.intent.confidence == pytest.approx(0.9)
        assert result.source == "heuristic"

    def test_mixed_request_has_lower_confidence(self):
        result = heuristics.heuristic_classify(
            "code bug team deadline client family vacation birthday"
        )

        assert result.intent.type == IntentType.WORK
        assert result.intent.confidence == pytest.approx(0.6)
        assert "5 work indicators, 3 personal indicators" in result.intent.reasoning

    def test_no_indicators_is_unclear(self):
        result = heuristics.heuristic_classify(AMBIGUOUS)

        assert result.intent.type == IntentType.UNCLEAR
        assert result.intent.confidence == 0.5
        assert result.intent.category == "chat"

    def test_category_rules_are_ordered(self):
        assert heuristics.detect_category("fix the bug in the login page") == "coding"
        assert heuristics.detect_category("merge my branch") == "github"
        assert heuristics.category_to_agent("nonsense") == "chat"

    def test_priority(self):
        assert heuristics.detect_priority("production is down, fix ASAP") == TaskPriority.URGENT
        assert heuristics.detect_priority("look at this today") == TaskPriority.HIGH
        assert heuristics.detect_priority("whenever you have a moment") == TaskPriority.LOW
        assert heuristics.detect_priority("update the readme") == TaskPriority.MEDIUM

    def test_title(self):
        assert heuristics.extract_title("Fix the login bug. It 500s on submit.") == "Fix the login bug"

        long = "a" * 80
        title = heuristics.extract_title(long)
        assert len(title) == heuristics.TITLE_LIMIT
        assert title.endswith("...")


class TestJsonExtraction:
    def test_object_wrapped_in_prose_and_fences(self):
        reply = 'Sure! Here you go:\n```json\n{"a": {"b": 1}}\n```\nAnything else?'
        assert extract_first_json_object(reply) == {"a": {"b": 1}}

    def test_braces_inside_strings_are_ignored(self):
        reply = 'Result: {"reasoning": "uses } and { freely", "ok": true} done'
        assert extract_first_json_object(reply) == {"reasoning": "uses } and { freely", "ok": True}

    def test_skips_non_json_braces(self):
        reply = 'Format is {type, confidence}; answer: {"type": "work"}'
        assert extract_first_json_object(reply) == {"type": "work"}

    def test_no_object(self):
        assert extract_first_json_object("I think this is work.") is None
        assert extract_first_json_object('{"unterminated": ') is None

    def test_schema_failure_is_a_parse_error(self):
        with pytest.raises(ParseError):
            parse_classification(classification_json(confidence=1.5))


class TestIntentClassifier:
    async def test_explicit_tag_skips_the_model(self):
        client = FakeModelClient()
        classifier = IntentClassifier(client, MODEL)

        result = await classifier.classify("[personal] plan my weekend trip")

        assert result.source == "explicit"
        assert result.intent.type == IntentType.PERSONAL
        assert result.intent.confidence == 1.0
        assert result.intent.category == "chat"
        assert result.extracted_task.priority == TaskPriority.MEDIUM
        assert result.extracted_task.title == "plan my weekend trip"
        assert client.calls == []

    async def test_confident_heuristic_skips_the_model(self):
        client = FakeModelClient()
        result = await IntentClassifier(client, MODEL).classify("deploy the api to staging")

        assert result.source == "heuristic"
        assert client.calls == []

    async def test_model_stage(self):
        client = FakeModelClient([
            text_response(f"Here is my analysis:\n```json\n{classification_json()}\n```"),
        ])
        classifier = IntentClassifier(client, MODEL)

        result = await classifier.classify(AMBIGUOUS)

        assert result.source == "model"
        assert result.intent.type == IntentType.PERSONAL
        assert result.intent.category == "creative"
        assert result.extracted_task.priority == TaskPriority.LOW

        call = client.calls[0]
        assert call["model"] == MODEL
        assert call["temperature"] == 0.3
        assert f'User request: "{AMBIGUOUS}"' in call["messages"][1].content

    async def test_missing_agent_is_filled_from_category(self):
        client = FakeModelClient([text_response(classification_json(suggestedAgent=None))])

        result = await IntentClassifier(client, MODEL).classify(AMBIGUOUS)

        assert result.intent.suggested_agent == "creative"

    @pytest.mark.parametrize("step", [
        text_response("I'm not sure, sorry."),
        text_response(classification_json(type="business")),
        ConnectionError("connection refused"),
    ])
    async def test_model_failures_fall_back_to_heuristics(self, step):
        client = FakeModelClient([step])

        result = await IntentClassifier(client, MODEL).classify(AMBIGUOUS)

        assert result.source == "heuristic"
        assert result.intent.type == IntentType.UNCLEAR
        assert len(client.calls) == 1

    async def test_unparseable_reply_keeps_the_mixed_heuristic(self):
        client = FakeModelClient([text_response("Probably work? Hard to say.")])

        result = await IntentClassifier(client, MODEL).classify(
            "code bug team deadline client family vacation birthday"
        )

        assert result.source == "heuristic"
        assert result.intent.type == IntentType.WORK
        assert result.intent.confidence == pytest.approx(0.6)

    async def test_no_model_uses_heuristics(self):
        result = await IntentClassifier().classify(AMBIGUOUS)

        assert result.source == "heuristic"
