# services/post_processor.py
from typing import List

from schemas.question_analysis import (
    AIVerdict,
    Analysis,
    AnalysisRequest,
    Difficulty,
    StatementBlock,
    Strategy,
    TopicBrief,
)
from services.coercion import as_string_list
from services.normalizer import DEFAULT_TOPIC_TITLE, normalize_confidence, statement_id


def _enforce_statements(statements: List[StatementBlock]) -> List[StatementBlock]:
    if not statements:
        return [StatementBlock(id=1, verdict="unknown", facts=[])]

    return [
        StatementBlock(
            id=statement_id(s.id, index + 1),
            verdict=s.verdict,
            facts=list(s.facts),
        )
        for index, s in enumerate(statements)
    ]


def _enforce_strategy(strategy: Strategy) -> Strategy:
    verdict = strategy.ai_verdict
    return Strategy(
        difficulty=Difficulty(
            level=strategy.difficulty.level,
            why=as_string_list(strategy.difficulty.why),
        ),
        exam_strategy=as_string_list(strategy.exam_strategy),
        logical_deduction=as_string_list(strategy.logical_deduction),
        ai_verdict=AIVerdict(
            recommendation=verdict.recommendation,
            rationale=verdict.rationale.strip(),
            confidence=normalize_confidence(verdict.confidence),
        ),
    )


def enforce(analysis: Analysis, request: AnalysisRequest) -> Analysis:
    """
    Apply the cross-field rules a normalized analysis still needs.

    The answer key always wins over whatever the model claimed. Running this
    twice gives the same result as running it once; the input is not mutated.
    """
    return Analysis(
        correct_answer=request.official_answer,
        topic_brief=TopicBrief(
            title=analysis.topic_brief.title.strip() or DEFAULT_TOPIC_TITLE,
            bullets=as_string_list(analysis.topic_brief.bullets),
        ),
        statements=_enforce_statements(analysis.statements),
        strategy=_enforce_strategy(analysis.strategy),
    )
