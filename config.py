from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Empty key means the analysis route refuses to call the generator
    OPENAI_API_KEY: str = ""
    OPENAI_ANALYSIS_MODEL: str = "gpt-4.1-mini"
    OPENAI_ANALYSIS_MAX_TOKENS: int = 1200

    # One entry per generation attempt. Later attempts run hotter.
    # From .env as JSON, e.g. OPENAI_ANALYSIS_TEMPERATURES=[0.2, 0.35, 0.5]
    OPENAI_ANALYSIS_TEMPERATURES: List[float] = [0.2, 0.35]

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
