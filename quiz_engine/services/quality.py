# Heuristic quality report for a generated question set (reporting only)
# quiz_engine/services/quality.py
from typing import List, Sequence

from quiz_engine.models.question import QuestionRecord

MIN_QUESTION_LENGTH = 10
MAX_QUESTION_LENGTH = 200


def find_quality_issues(questions: Sequence[QuestionRecord]) -> List[str]:
    issues = []
    counts = {}
    for q in questions:
        key = q.question.lower()
        counts[key] = counts.get(key, 0) + 1

    for index, q in enumerate(questions):
        if counts[q.question.lower()] > 1:
            issues.append(f"Duplicate question at index {index}")

        lowered = [opt.lower() for opt in q.options]
        similar = any(
            i != j and (a in b or b in a)
            for i, a in enumerate(lowered)
            for j, b in enumerate(lowered)
        )
        if similar:
            issues.append(f"Similar options in question {index + 1}")

        if len(q.question) < MIN_QUESTION_LENGTH:
            issues.append(f"Question {index + 1} is too short")
        if len(q.question) > MAX_QUESTION_LENGTH:
            issues.append(f"Question {index + 1} is too long")
    return issues


def quality_score(issues: Sequence[str]) -> int:
    return max(0, 100 - len(issues) * 10)
