# quiz_engine/utils/exceptions.py
"""Error taxonomy for question generation."""


class QuizEngineError(Exception):
    """Base class for all errors raised by the generation pipeline."""


class MalformedResponse(QuizEngineError):
    """No recoverable JSON structure could be found in an LLM response.

    Attributes:
        raw: The original response text, kept for diagnostics.
    """

    def __init__(self, raw: str, message: str = "Invalid JSON format from LLM response"):
        self.raw = raw
        super().__init__(message)


class InvalidQuestionStructure(QuizEngineError):
    """A parsed record violates the shape of a multiple-choice question."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Question {index + 1}: {reason}")


class UpstreamUnavailable(QuizEngineError):
    """The external generator could not be reached or returned nothing usable."""


class InvalidRequest(QuizEngineError):
    """Caller-supplied parameters are outside the allowed domain."""
