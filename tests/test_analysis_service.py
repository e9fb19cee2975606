"""
Unit tests for the generation client and its retry/fallback policy.

The OpenAI client is a MagicMock, so every test controls exactly what the
model "returns" on each attempt.
"""

import json
import pytest
from unittest.mock import MagicMock

from services.analysis_service import (
    FALLBACK_ANALYSIS,
    QuestionAnalysisGenerator,
    build_fallback_analysis,
    safe_parse_json,
)
from services.quality_gate import is_weak


def test_safe_parse_json():
    assert safe_parse_json('{"a": 1}') == {"a": 1}
    assert safe_parse_json("not json{{{") == {}
    assert safe_parse_json("") == {}
    assert safe_parse_json(None) == {}
    assert safe_parse_json("[1, 2]") == [1, 2]


def test_first_attempt_accepted(fake_client, request_payload, strong_json):
    client = fake_client(strong_json)
    generator = QuestionAnalysisGenerator(client=client, model="test-model", temperatures=[0.2, 0.35], max_tokens=900)

    analysis = generator.generate(request_payload)

    assert analysis.correct_answer == "C"
    assert analysis.topic_brief.title == "Fifteenth Finance Commission"
    assert client.chat.completions.create.call_count == 1

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["temperature"] == 0.2
    assert kwargs["max_tokens"] == 900
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0]["role"] == "user"
    assert "Official correct option is C." in kwargs["messages"][0]["content"]


def test_second_attempt_runs_hotter(fake_client, request_payload, strong_json):
    client = fake_client("invalid json{{{", strong_json)
    generator = QuestionAnalysisGenerator(client=client, temperatures=[0.2, 0.35])

    analysis = generator.generate(request_payload)

    assert not is_weak(analysis)
    temperatures = [c.kwargs["temperature"] for c in client.chat.completions.create.call_args_list]
    assert temperatures == [0.2, 0.35]


def test_both_attempts_rejected_returns_fallback(fake_client, request_payload):
    weak = json.dumps({"correct_answer": "A", "topic_brief": ["Core concept"], "statements": []})
    client = fake_client(weak, "{}")
    generator = QuestionAnalysisGenerator(client=client, temperatures=[0.2, 0.35])

    analysis = generator.generate(request_payload)

    assert client.chat.completions.create.call_count == 2
    assert analysis.correct_answer == "C"
    assert analysis.strategy.ai_verdict.recommendation == "skip"
    assert analysis.strategy.ai_verdict.confidence == 55
    assert len(analysis.statements) == 1
    assert analysis.statements[0].verdict == "unknown"
    assert analysis == build_fallback_analysis(request_payload)


def test_fallback_template_has_no_answer_of_its_own(request_payload):
    assert "correct_answer" not in FALLBACK_ANALYSIS
    assert build_fallback_analysis(request_payload).correct_answer == request_payload.official_answer


def test_attempt_count_follows_temperature_schedule(fake_client, request_payload):
    client = fake_client("{}", "{}", "{}")
    generator = QuestionAnalysisGenerator(client=client, temperatures=[0.1, 0.3, 0.5])

    generator.generate(request_payload)

    assert generator.max_attempts == 3
    assert client.chat.completions.create.call_count == 3


def test_default_schedule_is_two_attempts(fake_client, request_payload):
    client = fake_client("{}", "{}")
    generator = QuestionAnalysisGenerator(client=client)

    generator.generate(request_payload)

    assert generator.max_attempts == 2
    temperatures = [c.kwargs["temperature"] for c in client.chat.completions.create.call_args_list]
    assert temperatures[0] < temperatures[1]


def test_empty_schedule_rejected():
    with pytest.raises(ValueError):
        QuestionAnalysisGenerator(client=MagicMock(), temperatures=[])


def test_empty_completion_content_is_absorbed(request_payload):
    client = MagicMock()
    empty = MagicMock()
    empty.choices = [MagicMock(message=MagicMock(content=None))]
    client.chat.completions.create.return_value = empty
    generator = QuestionAnalysisGenerator(client=client, temperatures=[0.2])

    analysis = generator.generate(request_payload)

    assert analysis.correct_answer == "C"
    assert analysis.strategy.ai_verdict.recommendation == "skip"


def test_transport_errors_propagate(request_payload):
    client = MagicMock()
    client.chat.completions.create.side_effect = ConnectionError("network down")
    generator = QuestionAnalysisGenerator(client=client)

    with pytest.raises(ConnectionError):
        generator.generate(request_payload)

    assert client.chat.completions.create.call_count == 1


def test_model_cannot_override_answer_key(fake_client, request_payload, strong_raw):
    strong_raw["correct_answer"] = "A"
    client = fake_client(json.dumps(strong_raw))

    analysis = QuestionAnalysisGenerator(client=client).generate(request_payload)

    assert analysis.correct_answer == "C"
