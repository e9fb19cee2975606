import json
import logging
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from openai import OpenAI

from config import settings
from schemas.question_analysis import Analysis, AnalysisRequest
from services.normalizer import normalize_analysis
from services.openai_service import run_json_completion
from services.post_processor import enforce
from services.prompt_builder import build_prompt
from services.quality_gate import is_weak

logger = logging.getLogger(__name__)


# Returned when every attempt fails the quality gate. No correct_answer here:
# enforce() injects the official one.
FALLBACK_ANALYSIS: Dict[str, Any] = {
    "topic_brief": {
        "title": "Topic Brief",
        "bullets": [
            "This question hinges on a specific anchor fact; confirm it from a primary source.",
            "Attempt only if you can recall at least one anchor confidently under pressure.",
            "If no anchor exists quickly, skip to protect accuracy under negative marking.",
        ],
    },
    "statements": [
        {
            "id": 1,
            "verdict": "unknown",
            "facts": [
                {
                    "fact": "Confirm the key recall-based fact from an official document/textbook before relying on it in exam conditions.",
                    "source": {"name": "Standard book", "pointer": "Standard book • Reference"},
                },
            ],
        },
    ],
    "strategy": {
        "difficulty": {
            "level": "moderate",
            "why": ["Recall-heavy; depends on having read the source."],
        },
        "exam_strategy": [
            "Look for one high-confidence anchor fact; if absent, skip fast.",
            "Don't burn time validating multiple statements via guesswork.",
        ],
        "logical_deduction": [
            "Prefer stable anchors (definitions, core NCERT concepts) over fuzzy recall.",
            "If >2 statements need blind recall, treat as a skip candidate.",
        ],
        "ai_verdict": {
            "recommendation": "skip",
            "rationale": "Attempt only if you have a high-confidence anchor fact; otherwise skip to protect score under negative marking.",
            "confidence": 55,
        },
    },
}


class GenerationState(Enum):
    ATTEMPTING = "attempting"
    EXHAUSTED = "exhausted"


def safe_parse_json(text: Optional[str]) -> Any:
    """Parse model output; anything unparseable becomes an empty object."""
    try:
        return json.loads(text or "")
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning(f"Model returned invalid JSON: {e}")
        return {}


def build_fallback_analysis(request: AnalysisRequest) -> Analysis:
    fallback = normalize_analysis(FALLBACK_ANALYSIS, question_text=request.question_text)
    return enforce(fallback, request)


class QuestionAnalysisGenerator:
    """
    Generates a question analysis with a bounded retry-then-fallback policy.

    One attempt is made per entry in `temperatures`, in order, stopping at the
    first result the quality gate accepts. If none is accepted, a fixed
    fallback analysis is returned instead. Errors from the OpenAI client itself
    are not caught; the caller decides how to surface them.
    """

    def __init__(
        self,
        client: OpenAI,
        model: Optional[str] = None,
        temperatures: Optional[Sequence[float]] = None,
        max_tokens: Optional[int] = None,
    ):
        self.client = client
        self.model = model or settings.OPENAI_ANALYSIS_MODEL
        self.temperatures = tuple(
            settings.OPENAI_ANALYSIS_TEMPERATURES if temperatures is None else temperatures
        )
        self.max_tokens = settings.OPENAI_ANALYSIS_MAX_TOKENS if max_tokens is None else max_tokens

        if not self.temperatures:
            raise ValueError("temperatures must contain at least one attempt")

    @property
    def max_attempts(self) -> int:
        return len(self.temperatures)

    def _attempt(self, request: AnalysisRequest, prompt: str, temperature: float) -> Analysis:
        raw = run_json_completion(
            self.client,
            prompt=prompt,
            model=self.model,
            temperature=temperature,
            max_tokens=self.max_tokens,
        )
        parsed = safe_parse_json(raw)
        analysis = normalize_analysis(parsed, question_text=request.question_text)
        return enforce(analysis, request)

    def generate(self, request: AnalysisRequest) -> Analysis:
        prompt = build_prompt(request)

        state = GenerationState.ATTEMPTING
        attempt = 0

        while state is GenerationState.ATTEMPTING:
            temperature = self.temperatures[attempt]
            attempt += 1

            analysis = self._attempt(request, prompt, temperature)
            if not is_weak(analysis):
                logger.info(f"Analysis accepted on attempt {attempt}/{self.max_attempts} (temperature={temperature})")
                return analysis

            logger.warning(f"Analysis rejected as weak on attempt {attempt}/{self.max_attempts} (temperature={temperature})")
            if attempt >= self.max_attempts:
                state = GenerationState.EXHAUSTED

        logger.warning(f"All {self.max_attempts} attempts rejected; returning fallback analysis")
        return build_fallback_analysis(request)
