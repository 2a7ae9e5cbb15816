# quiz_engine/services/scoring.py
from typing import List, Optional, Sequence

from quiz_engine.models.quiz import QuestionResult, SubmissionData, SubmittedQuestion
from quiz_engine.utils.exceptions import InvalidRequest


def performance_level(score: float) -> str:
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "fair"
    return "needs_improvement"


def score_submission(questions: Sequence[SubmittedQuestion], user_answers: Sequence[Optional[str]],
                     topic: Optional[str] = None, difficulty: Optional[str] = None) -> SubmissionData:
    """Grades answers by exact match against each question's answer; missing answers count as wrong."""
    if not questions or user_answers is None:
        raise InvalidRequest("Questions and user answers are required")

    results: List[QuestionResult] = []
    correct_count = 0
    for index, question in enumerate(questions):
        user_answer = user_answers[index] if index < len(user_answers) else None
        is_correct = user_answer == question.answer
        if is_correct:
            correct_count += 1
        results.append(QuestionResult(
            question_index=index,
            question=question.question,
            user_answer=user_answer,
            correct_answer=question.answer,
            is_correct=is_correct,
            explanation=question.explanation,
        ))

    score = correct_count / len(questions) * 100
    return SubmissionData(
        topic=topic,
        difficulty=difficulty,
        total_questions=len(questions),
        correct_answers=correct_count,
        score=f"{score:.1f}",
        performance_level=performance_level(score),
        results=results,
    )
