# services/normalizer.py
"""
Turns whatever JSON the model returned into a fully-typed Analysis.

normalize_analysis() must never raise: None, lists, bare strings and
half-shaped objects all come out as a valid Analysis with defaults filled in.
Every field is coerced on its own with a fallback rather than validating the
whole payload in one go, so one bad field never costs us the rest.
"""
import logging
from typing import Any, List, Optional

from schemas.question_analysis import (
    AIVerdict,
    ANSWER_OPTIONS,
    Analysis,
    Difficulty,
    Fact,
    StatementBlock,
    Strategy,
    TopicBrief,
)
from services.coercion import (
    as_array,
    as_mapping,
    as_number,
    as_positive_int,
    as_string,
    as_string_list,
    clamp,
    pick_literal,
)
from services.source_classifier import sanitize_source

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_TITLE = "Topic Brief"
DEFAULT_CONFIDENCE = 60

VERDICTS = ("correct", "incorrect", "unknown")
DIFFICULTY_LEVELS = ("easy", "moderate", "hard")


def normalize_confidence(value: Any) -> int:
    return int(round(clamp(as_number(value, DEFAULT_CONFIDENCE), 0, 100)))


def statement_id(value: Any, position: int) -> int:
    """The model's id if it is a positive number, else the 1-based position."""
    parsed = as_positive_int(value)
    return parsed if parsed is not None else position


def _normalize_topic_brief(value: Any) -> TopicBrief:
    # The model has produced all three shapes over time
    if isinstance(value, dict):
        title = as_string(value.get("title")).strip() or DEFAULT_TOPIC_TITLE
        return TopicBrief(title=title, bullets=as_string_list(value.get("bullets")))
    if isinstance(value, list):
        return TopicBrief(title=DEFAULT_TOPIC_TITLE, bullets=as_string_list(value))
    if isinstance(value, str):
        return TopicBrief(title=DEFAULT_TOPIC_TITLE, bullets=as_string_list([value]))
    return TopicBrief(title=DEFAULT_TOPIC_TITLE)


def _normalize_fact(value: Any, question_text: str) -> Optional[Fact]:
    raw = as_mapping(value)
    fact = as_string(raw.get("fact")).strip()
    if not fact:
        return None

    example = as_string(raw.get("example")).strip() or None
    source = sanitize_source(raw.get("source"), question_text, fact)
    return Fact(fact=fact, example=example, source=source)


def _normalize_statement(value: Any, position: int, question_text: str) -> StatementBlock:
    raw = as_mapping(value)

    facts: List[Fact] = []
    for item in as_array(raw.get("facts")):
        fact = _normalize_fact(item, question_text)
        if fact is not None:
            facts.append(fact)

    return StatementBlock(
        id=statement_id(raw.get("id"), position),
        verdict=pick_literal(raw.get("verdict"), VERDICTS, "unknown"),
        facts=facts,
    )


def _normalize_strategy(value: Any) -> Strategy:
    raw = as_mapping(value)
    difficulty = as_mapping(raw.get("difficulty"))
    verdict = as_mapping(raw.get("ai_verdict"))

    recommendation = "skip" if as_string(verdict.get("recommendation")) == "skip" else "attempt"

    return Strategy(
        difficulty=Difficulty(
            level=pick_literal(difficulty.get("level"), DIFFICULTY_LEVELS, "moderate"),
            why=as_string_list(difficulty.get("why")),
        ),
        exam_strategy=as_string_list(raw.get("exam_strategy")),
        logical_deduction=as_string_list(raw.get("logical_deduction")),
        ai_verdict=AIVerdict(
            recommendation=recommendation,
            rationale=as_string(verdict.get("rationale")).strip(),
            confidence=normalize_confidence(verdict.get("confidence")),
        ),
    )


def normalize_analysis(raw: Any, question_text: str = "") -> Analysis:
    """
    Build an Analysis from an arbitrary parsed JSON value.

    question_text is only used to help classify fact sources. The returned
    correct_answer is the model's own letter (or None); callers that know the
    answer key must run post_processor.enforce() afterwards.
    """
    if not isinstance(raw, dict):
        logger.warning(f"Analysis payload is a {type(raw).__name__}, not an object; using defaults")

    obj = as_mapping(raw)

    answer = as_string(obj.get("correct_answer")).strip().upper()

    statements = [
        _normalize_statement(item, index + 1, question_text)
        for index, item in enumerate(as_array(obj.get("statements")))
    ]

    return Analysis(
        correct_answer=answer if answer in ANSWER_OPTIONS else None,
        topic_brief=_normalize_topic_brief(obj.get("topic_brief")),
        statements=statements,
        strategy=_normalize_strategy(obj.get("strategy")),
    )
