# API payloads for the quiz endpoints
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from quiz_engine.models.question import QuestionRecord

class QuizRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: Optional[str] = None
    difficulty: Optional[str] = None
    question_count: int = Field(50, alias="questionCount")
    language: str = "english"

class QuizData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str
    difficulty: str
    question_count: int = Field(alias="questionCount")
    questions: List[QuestionRecord]
    quality_score: int = Field(alias="qualityScore")

class QuizResponse(BaseModel):
    success: bool = True
    data: QuizData

class SubmittedQuestion(BaseModel):
    question: str
    options: List[str] = []
    answer: str
    explanation: Optional[str] = None

class QuizSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    questions: Optional[List[SubmittedQuestion]] = None
    user_answers: Optional[List[Optional[str]]] = Field(None, alias="userAnswers")
    topic: Optional[str] = None
    difficulty: Optional[str] = None

class QuestionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_index: int = Field(alias="questionIndex")
    question: str
    user_answer: Optional[str] = Field(alias="userAnswer")
    correct_answer: str = Field(alias="correctAnswer")
    is_correct: bool = Field(alias="isCorrect")
    explanation: Optional[str] = None

class SubmissionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: Optional[str] = None
    difficulty: Optional[str] = None
    total_questions: int = Field(alias="totalQuestions")
    correct_answers: int = Field(alias="correctAnswers")
    score: str
    performance_level: str = Field(alias="performanceLevel")
    results: List[QuestionResult]

class SubmissionResponse(BaseModel):
    success: bool = True
    data: SubmissionData
