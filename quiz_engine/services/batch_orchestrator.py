# Fans one generation request out into bounded, concurrent batch calls
# quiz_engine/services/batch_orchestrator.py
import asyncio
import math
from itertools import chain
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from quiz_engine.models.question import BatchResult, GenerationRequest, QuestionRecord
from quiz_engine.services.question_validator import QuestionValidator, question_validator
from quiz_engine.services.response_parser import ResponseRecoveryParser, response_parser
from quiz_engine.utils.exceptions import InvalidQuestionStructure, MalformedResponse, UpstreamUnavailable
from quiz_engine.utils.logger import logger

BatchCallback = Callable[[BatchResult], None]

# Errors that cost a single batch its questions but never abort the run.
BATCH_ERRORS = (MalformedResponse, InvalidQuestionStructure, UpstreamUnavailable)


class QuestionGenerator(Protocol):
    async def generate(self, topic: str, difficulty: str, count: int, language: str) -> str: ...


def plan_batches(total_count: int, batch_size: int) -> List[int]:
    """Sub-counts per batch; every batch is `batch_size` except possibly the last."""
    batches = math.ceil(total_count / batch_size)
    return [
        total_count - index * batch_size if index == batches - 1 else batch_size
        for index in range(batches)
    ]


async def run_with_concurrency(task_fns: Sequence[Callable[[], Awaitable]], limit: int) -> list:
    """
    Runs task_fns with at most `limit` in flight. Workers take the next index
    in submission order and write only their own result slot.
    """
    results: list = [None] * len(task_fns)
    next_index = 0

    async def worker():
        nonlocal next_index
        while next_index < len(task_fns):
            current = next_index
            next_index += 1
            results[current] = await task_fns[current]()

    await asyncio.gather(*(worker() for _ in range(min(limit, len(task_fns)))))
    return results


def merge_and_dedupe(batches: Sequence[Sequence[QuestionRecord]], total_count: int) -> List[QuestionRecord]:
    combined = list(chain.from_iterable(batches))[:total_count]
    seen = set()
    deduped = []
    for question in combined:
        key = question.question.lower()
        if key not in seen:
            seen.add(key)
            deduped.append(question)
        if len(deduped) == total_count:
            break
    return deduped


class BatchOrchestrator:
    def __init__(self, client: QuestionGenerator,
                 parser: ResponseRecoveryParser = response_parser,
                 validator: QuestionValidator = question_validator):
        self.client = client
        self.parser = parser
        self.validator = validator

    async def run(self, request: GenerationRequest, on_batch: Optional[BatchCallback] = None) -> List[QuestionRecord]:
        sizes = plan_batches(request.total_count, request.batch_size)
        total_batches = len(sizes)
        topic = request.topic
        difficulty = request.difficulty.value
        language = request.language.value

        logger.info(
            f"Generating {request.total_count} questions on '{topic}' ({difficulty}, {language}) "
            f"in {total_batches} batches, max {request.max_parallel} in parallel"
        )

        async def run_batch(index: int) -> List[QuestionRecord]:
            try:
                raw = await self.client.generate(topic, difficulty, sizes[index], language)
                records = self.parser.parse(raw)
                questions = self.validator.validate(records, topic, difficulty)
            except BATCH_ERRORS as e:
                logger.warning(f"Batch {index + 1}/{total_batches} failed: {e}")
                return []

            if on_batch is not None:
                try:
                    on_batch(BatchResult(index=index, total_batches=total_batches, questions=questions))
                except Exception:
                    logger.exception(f"Batch subscriber failed for batch {index + 1}/{total_batches}")
            return questions

        task_fns = [lambda index=index: run_batch(index) for index in range(total_batches)]
        results = await run_with_concurrency(task_fns, request.max_parallel)

        questions = merge_and_dedupe(results, request.total_count)
        failed = sum(1 for batch in results if not batch)
        logger.info(f"Assembled {len(questions)}/{request.total_count} questions ({failed} empty batches)")
        return questions
