import logging
from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query

from config import settings
from schemas.question_analysis import ANSWER_OPTIONS, Analysis, AnalysisRequest
from services.analysis_service import QuestionAnalysisGenerator
from services.normalizer import normalize_analysis
from services.openai_service import create_openai_client
from services.post_processor import enforce

router = APIRouter()


def get_question_analysis_generator() -> QuestionAnalysisGenerator:
    """A fresh generator (and OpenAI client) per request."""
    if not settings.OPENAI_API_KEY:
        logging.error("OPENAI_API_KEY missing; refusing to generate analysis")
        raise HTTPException(status_code=500, detail="OPENAI_API_KEY missing")
    return QuestionAnalysisGenerator(client=create_openai_client())


@router.post("/question-analysis", response_model=Analysis)
def question_analysis(
    req: AnalysisRequest,
    generator: QuestionAnalysisGenerator = Depends(get_question_analysis_generator),
):
    """
    Generate a statement-wise analysis for one multiple-choice question.
    The returned correct_answer is always the request's official_answer.
    """
    try:
        return generator.generate(req)
    except Exception as e:
        logging.error(f"Question Analysis error: {e}")
        raise HTTPException(
            status_code=500,
            detail="Question analysis service error",
        )


@router.post("/question-analysis/normalize", response_model=Analysis)
def normalize_stored_analysis(
    payload: Any = Body(default=None),
    official_answer: Optional[str] = Query(default=None),
    question_text: str = Query(default=""),
):
    """
    Re-normalize a previously stored analysis payload before serving it.
    When official_answer is given, the answer key is enforced as well.
    """
    analysis = normalize_analysis(payload, question_text=question_text)
    if official_answer is None:
        return analysis

    answer = official_answer.strip().upper()
    if answer not in ANSWER_OPTIONS:
        raise HTTPException(status_code=400, detail="Correct option invalid")

    return enforce(analysis, AnalysisRequest(question_text=question_text, official_answer=answer))
