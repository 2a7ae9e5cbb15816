# Data models for generated questions and generation runs
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Tuple

from quiz_engine.models.enums import Difficulty, Language

class QuestionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    options: Tuple[str, ...]  # always exactly 4, answer is one of them
    answer: str
    explanation: str

class GenerationRequest(BaseModel):
    """A validated request for one orchestration run."""
    model_config = ConfigDict(frozen=True)

    topic: str
    difficulty: Difficulty
    language: Language
    total_count: int = Field(ge=1, le=100)
    batch_size: int = Field(ge=1)
    max_parallel: int = Field(ge=1)

class BatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    total_batches: int
    questions: List[QuestionRecord]
