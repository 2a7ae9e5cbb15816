# quiz_engine/services/question_validator.py
from typing import Any, List, Sequence

from quiz_engine.models.question import QuestionRecord
from quiz_engine.utils.exceptions import InvalidQuestionStructure

OPTION_COUNT = 4


def fallback_explanation(topic: str, difficulty: str) -> str:
    return f"This is the correct answer for this {difficulty} level question about {topic}."


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class QuestionValidator:
    def validate(self, records: Sequence[Any], topic: str, difficulty: str) -> List[QuestionRecord]:
        """
        Converts parsed records into QuestionRecords. The whole batch is
        rejected with InvalidQuestionStructure at the first bad record.
        """
        if not isinstance(records, (list, tuple)):
            raise InvalidQuestionStructure(0, "questions must be an array")

        validated = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise InvalidQuestionStructure(index, "record is not an object")

            question = _text(record.get("question"))
            raw_options = record.get("options")
            answer = _text(record.get("answer"))
            if not question or not isinstance(raw_options, list) or not answer:
                raise InvalidQuestionStructure(index, "invalid question structure")
            if len(raw_options) != OPTION_COUNT:
                raise InvalidQuestionStructure(index, f"must have exactly {OPTION_COUNT} options")

            options = tuple(_text(opt) for opt in raw_options)
            if not all(options):
                raise InvalidQuestionStructure(index, "options must be non-empty")
            if len(set(options)) != OPTION_COUNT:
                raise InvalidQuestionStructure(index, "options must be distinct")
            if answer not in options:
                raise InvalidQuestionStructure(index, "answer must be one of the options")

            validated.append(QuestionRecord(
                question=question,
                options=options,
                answer=answer,
                explanation=_text(record.get("explanation")) or fallback_explanation(topic, difficulty),
            ))
        return validated


question_validator = QuestionValidator()
