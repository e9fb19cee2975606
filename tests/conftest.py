"""
Shared fixtures for the question analysis tests.

The OpenAI client is always a MagicMock; no test talks to the network.
"""

import json
import pytest
from unittest.mock import MagicMock

from schemas.question_analysis import AnalysisRequest


def make_completion(content):
    """Shape a chat-completions response the way the OpenAI SDK returns it."""
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=content))]
    return completion


@pytest.fixture
def fake_client():
    """Factory for a fake OpenAI client returning one completion per call, in order."""
    def _make(*contents):
        client = MagicMock()
        client.chat.completions.create.side_effect = [make_completion(c) for c in contents]
        return client
    return _make


@pytest.fixture
def request_payload():
    return AnalysisRequest(
        question_text=(
            "Consider the following statements about the Fifteenth Finance Commission:\n"
            "1. It was constituted by a Ministry of Finance notification in 2017.\n"
            "2. Its award period covered 2021-26."
        ),
        options={"A": "1 only", "B": "2 only", "C": "Both 1 and 2", "D": "Neither 1 nor 2"},
        official_answer="C",
    )


@pytest.fixture
def strong_raw():
    """A generator payload specific enough to pass the quality gate."""
    return {
        "correct_answer": "B",
        "topic_brief": {
            "title": "Fifteenth Finance Commission",
            "bullets": [
                "Constituted under Article 280 in November 2017, chaired by N.K. Singh.",
                "First report covered 2020-21; final report covered 2021-26.",
                "Recommended 41% vertical devolution to states.",
            ],
        },
        "statements": [
            {
                "id": 1,
                "verdict": "correct",
                "facts": [
                    {
                        "fact": "The commission was notified on 27 November 2017.",
                        "source": {
                            "name": "Govt website",
                            "pointer": "Ministry of Finance • Gazette notification 2017",
                            "url": "https://fincomindia.nic.in",
                        },
                    },
                    {
                        "fact": "N.K. Singh was appointed chairman.",
                        "example": "Other members included Ajay Narayan Jha.",
                        "source": {"name": "PIB", "pointer": "PIB • Release dated 27 Nov 2017"},
                    },
                ],
            },
            {
                "id": 2,
                "verdict": "correct",
                "facts": [
                    {
                        "fact": "The final report covers the five years 2021-22 to 2025-26.",
                        "source": {"name": "Govt website", "pointer": "XV-FC Report • Volume I"},
                    },
                ],
            },
        ],
        "strategy": {
            "difficulty": {"level": "easy", "why": ["Both statements are headline facts."]},
            "exam_strategy": [
                "Anchor on the 2021-26 award period.",
                "Eliminate options that drop statement 2.",
            ],
            "logical_deduction": [
                "A commission reporting for 2021-26 must have been set up years earlier.",
                "2017 fits the five-year cycle after the Fourteenth commission.",
            ],
            "ai_verdict": {
                "recommendation": "attempt",
                "rationale": "Both statements are widely reported and easy to recall.",
                "confidence": 85,
            },
        },
    }


@pytest.fixture
def strong_json(strong_raw):
    return json.dumps(strong_raw)
