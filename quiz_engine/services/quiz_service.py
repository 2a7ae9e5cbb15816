# quiz_engine/services/quiz_service.py
from typing import Any, List, Optional

from fastapi import Request

from quiz_engine.models.enums import Difficulty, Language
from quiz_engine.models.question import BatchResult, GenerationRequest, QuestionRecord
from quiz_engine.services.batch_orchestrator import BatchCallback, BatchOrchestrator
from quiz_engine.services.result_cache import ResultCache
from quiz_engine.utils.exceptions import InvalidRequest, UpstreamUnavailable
from quiz_engine.utils.logger import logger

MIN_QUESTIONS = 1
MAX_QUESTIONS = 100


def _coerce_int(value: Any, error: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequest(error) from None


class QuizService:
    """
    Serves question sets: consults the result cache first and falls back to
    a batched generation run, writing longer results back to the cache.
    """

    def __init__(self, cache: ResultCache, orchestrator: BatchOrchestrator,
                 default_batch_size: int = 10, default_parallel: int = 3):
        self.cache = cache
        self.orchestrator = orchestrator
        self.default_batch_size = default_batch_size
        self.default_parallel = default_parallel

    def build_request(self, topic: Optional[str], difficulty: Optional[str], question_count: Any = 50,
                      language: Optional[str] = "english", batch_size: Any = None,
                      parallel: Any = None) -> GenerationRequest:
        """Validates caller input; raises InvalidRequest before any work starts."""
        topic = (topic or "").strip()
        if not topic or not difficulty:
            raise InvalidRequest("Topic and difficulty are required")

        difficulty = str(difficulty).strip().lower()
        if difficulty not in {d.value for d in Difficulty}:
            raise InvalidRequest("Difficulty must be easy, medium, or hard")

        language = str(language or "english").strip().lower()
        if language not in {lang.value for lang in Language}:
            raise InvalidRequest("Language must be english, hindi, or bengali")

        count_error = f"Question count must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}"
        count = _coerce_int(question_count, count_error)
        if count < MIN_QUESTIONS or count > MAX_QUESTIONS:
            raise InvalidRequest(count_error)

        requested_batch = _coerce_int(batch_size, "batchSize must be an integer") if batch_size else 0
        requested_parallel = _coerce_int(parallel, "parallel must be an integer") if parallel else 0

        return GenerationRequest(
            topic=topic,
            difficulty=Difficulty(difficulty),
            language=Language(language),
            total_count=count,
            batch_size=max(1, min(requested_batch or self.default_batch_size, count)),
            max_parallel=max(1, requested_parallel or self.default_parallel),
        )

    async def generate_questions(self, request: GenerationRequest,
                                 on_batch: Optional[BatchCallback] = None) -> List[QuestionRecord]:
        client = self.orchestrator.client
        if not getattr(client, "is_configured", True):
            raise UpstreamUnavailable("LLM API key not configured")

        topic, difficulty, language = request.topic, request.difficulty.value, request.language.value
        cached = self.cache.get(topic, difficulty, language)
        if cached is not None and len(cached) >= request.total_count:
            questions = cached[:request.total_count]
            logger.info(f"Cache hit for '{topic}' ({difficulty}, {language}): serving {len(questions)} questions")
            if on_batch is not None:
                on_batch(BatchResult(index=0, total_batches=1, questions=questions))
            return questions

        questions = await self.orchestrator.run(request, on_batch=on_batch)
        if not questions:
            logger.warning(f"No valid questions generated for '{topic}' ({difficulty}, {language})")

        if questions and (cached is None or len(questions) > len(cached)):
            self.cache.set(topic, difficulty, language, questions)
        return list(questions)


def get_quiz_service(request: Request) -> QuizService:
    """FastAPI dependency returning the service created at startup."""
    return request.app.state.quiz_service
