from schemas.question_analysis import AnalysisRequest


QUESTION_ANALYSIS_PROMPT_TEMPLATE = """
You are a UPSC Prelims (GS) expert.

NON-NEGOTIABLE:
- Official correct option is {official_answer}.
- correct_answer MUST be "{official_answer}".
- Do NOT dispute the answer key.

STYLE RULES (STRICT):
- No generic filler lines.
- Topic Brief: 3-6 bullets, SPECIFIC to this question/topic.
- Statement-wise: Provide supporting/contradicting FACTS (not rephrases).
- Each statement should have 2-4 facts if possible.
- Sources: If you cannot give exact NCERT/TN location confidently, keep pointer generic but professional.
- Prefer PIB/Govt/International org for schemes, reports, numeric statistics, treaties.

OUTPUT: Return ONLY a single JSON object (no markdown, no extra text) in this schema:

{{
  "correct_answer": "A|B|C|D",
  "topic_brief": {{ "title": "string", "bullets": ["string"] }},
  "statements": [
    {{
      "id": 1,
      "verdict": "correct|incorrect|unknown",
      "facts": [
        {{
          "fact": "string",
          "example": "string (optional)",
          "source": {{
            "name": "NCERT|Tamil Nadu Board|Standard book|PIB|Govt website|International org|The Hindu|Indian Express|Other",
            "pointer": "string",
            "url": "string (optional)"
          }}
        }}
      ]
    }}
  ],
  "strategy": {{
    "difficulty": {{ "level": "easy|moderate|hard", "why": ["string"] }},
    "exam_strategy": ["string"],
    "logical_deduction": ["string"],
    "ai_verdict": {{
      "recommendation": "attempt|skip",
      "rationale": "string",
      "confidence": 0
    }}
  }}
}}

Question:
{question_text}

Options:
A) {option_a}
B) {option_b}
C) {option_c}
D) {option_d}
"""


def build_prompt(request: AnalysisRequest) -> str:
    """Render the generation prompt. Same request, same prompt."""
    options = request.options
    return QUESTION_ANALYSIS_PROMPT_TEMPLATE.format(
        official_answer=request.official_answer,
        question_text=request.question_text,
        option_a=options.A or "",
        option_b=options.B or "",
        option_c=options.C or "",
        option_d=options.D or "",
    ).strip()
