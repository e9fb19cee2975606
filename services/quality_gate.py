# services/quality_gate.py
"""
Heuristic check for template-y or thin analyses.

This only looks at shape and phrasing. It cannot tell whether a fact is true,
only whether the output reads like filler the model produces when it has
nothing specific to say.
"""
from typing import Iterable, List

from schemas.question_analysis import Analysis, Fact

GENERIC_TOPIC_PHRASES = (
    "core concept",
    "key definition",
    "where upsc hides confusion",
    "what to recall vs what to deduce",
    "general reference",
)

GENERIC_FACT_PHRASES = (
    "matches the key concept",
    "other options contradict",
    "standard framing",
    "general reference",
    "directly matches the fact asked",
)

MIN_TOPIC_BULLETS = 2
MIN_FACTS_PER_STATEMENT = 2
MIN_EXAM_STRATEGY = 2
MIN_LOGICAL_DEDUCTION = 2
MIN_DIFFICULTY_WHY = 1
MIN_RATIONALE_LENGTH = 10


def _contains_any(texts: Iterable[str], phrases: Iterable[str]) -> bool:
    joined = " | ".join(texts).lower()
    return any(p in joined for p in phrases)


def looks_generic_topic_bullets(bullets: List[str]) -> bool:
    return _contains_any(bullets, GENERIC_TOPIC_PHRASES)


def looks_generic_facts(facts: List[Fact]) -> bool:
    return _contains_any((f.fact for f in facts), GENERIC_FACT_PHRASES)


def _has_substantive_statement(analysis: Analysis) -> bool:
    return any(
        len(s.facts) >= MIN_FACTS_PER_STATEMENT and not looks_generic_facts(s.facts)
        for s in analysis.statements
    )


def is_weak(analysis: Analysis) -> bool:
    bullets = analysis.topic_brief.bullets
    if len(bullets) < MIN_TOPIC_BULLETS or looks_generic_topic_bullets(bullets):
        return True

    if not analysis.statements or not _has_substantive_statement(analysis):
        return True

    strategy = analysis.strategy
    if len(strategy.exam_strategy) < MIN_EXAM_STRATEGY:
        return True
    if len(strategy.logical_deduction) < MIN_LOGICAL_DEDUCTION:
        return True
    if len(strategy.difficulty.why) < MIN_DIFFICULTY_WHY:
        return True

    return len(strategy.ai_verdict.rationale.strip()) < MIN_RATIONALE_LENGTH
