from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Literal, Optional


AnswerOption = Literal["A", "B", "C", "D"]
StatementVerdict = Literal["correct", "incorrect", "unknown"]
DifficultyLevel = Literal["easy", "moderate", "hard"]
Recommendation = Literal["attempt", "skip"]
SourceName = Literal[
    "NCERT",
    "Tamil Nadu Board",
    "Standard book",
    "PIB",
    "Govt website",
    "International org",
    "The Hindu",
    "Indian Express",
    "Other",
]

ANSWER_OPTIONS = ("A", "B", "C", "D")


class QuestionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    A: Optional[str] = None
    B: Optional[str] = None
    C: Optional[str] = None
    D: Optional[str] = None


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_text: str
    options: QuestionOptions = Field(default_factory=QuestionOptions)
    official_answer: AnswerOption  # the answer key; the model never overrides it

    @field_validator("official_answer", mode="before")
    @classmethod
    def normalize_official_answer(cls, value: Any) -> Any:
        # " c " from a DB column is still option C
        if isinstance(value, str):
            return value.strip().upper()
        return value


class SourceRef(BaseModel):
    name: SourceName
    pointer: str = Field(min_length=1)  # e.g. "NCERT • Class 12 • History • Ch 8"
    url: Optional[str] = None  # only kept for linkable sources


class Fact(BaseModel):
    fact: str = Field(min_length=1)
    example: Optional[str] = None
    source: SourceRef


class StatementBlock(BaseModel):
    id: int = Field(gt=0)
    verdict: StatementVerdict = "unknown"
    facts: List[Fact] = Field(default_factory=list)


class TopicBrief(BaseModel):
    title: str = "Topic Brief"
    bullets: List[str] = Field(default_factory=list)


class Difficulty(BaseModel):
    level: DifficultyLevel = "moderate"
    why: List[str] = Field(default_factory=list)


class AIVerdict(BaseModel):
    recommendation: Recommendation = "attempt"
    rationale: str = ""
    confidence: int = Field(default=60, ge=0, le=100)


class Strategy(BaseModel):
    difficulty: Difficulty = Field(default_factory=Difficulty)
    exam_strategy: List[str] = Field(default_factory=list)
    logical_deduction: List[str] = Field(default_factory=list)
    ai_verdict: AIVerdict = Field(default_factory=AIVerdict)


class Analysis(BaseModel):
    # None only between normalization and post-processing
    correct_answer: Optional[AnswerOption] = None
    topic_brief: TopicBrief = Field(default_factory=TopicBrief)
    statements: List[StatementBlock] = Field(default_factory=list)
    strategy: Strategy = Field(default_factory=Strategy)
