# tests/test_quiz_service.py
import asyncio

import pytest

from quiz_engine.models.enums import Difficulty, Language
from quiz_engine.services.batch_orchestrator import BatchOrchestrator
from quiz_engine.services.question_validator import question_validator
from quiz_engine.services.quiz_service import QuizService
from quiz_engine.services.response_parser import response_parser
from quiz_engine.services.result_cache import ResultCache
from quiz_engine.utils.exceptions import InvalidRequest, UpstreamUnavailable


def seed_cache(cache, raw):
    """Caches the questions in `raw` for Cells/easy/english and returns them."""
    questions = question_validator.validate(response_parser.parse(raw), "Cells", "easy")
    cache.set("Cells", "easy", "english", questions)
    return questions


@pytest.mark.unit
class TestBuildRequest:
    def test_defaults_are_resolved(self, quiz_service):
        request = quiz_service.build_request("  Cells ", "MEDIUM", 25, "Hindi")
        assert request.topic == "Cells"
        assert request.difficulty is Difficulty.MEDIUM
        assert request.language is Language.HINDI
        assert request.total_count == 25
        assert request.batch_size == 10
        assert request.max_parallel == 3

    def test_batch_size_is_clamped_to_count(self, quiz_service):
        request = quiz_service.build_request("Cells", "easy", 4, "english", batch_size=50, parallel=0)
        assert request.batch_size == 4
        assert request.max_parallel == 3

    def test_string_parameters_are_coerced(self, quiz_service):
        request = quiz_service.build_request("Cells", "easy", "30", "bengali", batch_size="5", parallel="2")
        assert (request.total_count, request.batch_size, request.max_parallel) == (30, 5, 2)

    @pytest.mark.parametrize("args,message", [
        ((None, "easy", 10, "english"), "Topic and difficulty are required"),
        (("   ", "easy", 10, "english"), "Topic and difficulty are required"),
        (("Cells", None, 10, "english"), "Topic and difficulty are required"),
        (("Cells", "expert", 10, "english"), "Difficulty must be easy, medium, or hard"),
        (("Cells", "easy", 10, "french"), "Language must be english, hindi, or bengali"),
        (("Cells", "easy", 0, "english"), "Question count must be between 1 and 100"),
        (("Cells", "easy", 101, "english"), "Question count must be between 1 and 100"),
        (("Cells", "easy", "many", "english"), "Question count must be between 1 and 100"),
    ])
    def test_invalid_input_is_rejected(self, quiz_service, args, message):
        with pytest.raises(InvalidRequest, match=message):
            quiz_service.build_request(*args)


@pytest.mark.unit
class TestGenerateQuestions:
    def test_generated_set_is_cached(self, quiz_service, fake_generator):
        request = quiz_service.build_request("Cells", "easy", 15, "english")
        first = asyncio.run(quiz_service.generate_questions(request))
        calls_after_first = len(fake_generator.calls)

        second = asyncio.run(quiz_service.generate_questions(request))
        assert second == first
        assert len(fake_generator.calls) == calls_after_first

    def test_cache_hit_serves_prefix_for_smaller_request(self, quiz_service, fake_generator):
        asyncio.run(quiz_service.generate_questions(quiz_service.build_request("Cells", "easy", 20, "english")))
        calls = len(fake_generator.calls)

        smaller = asyncio.run(quiz_service.generate_questions(
            quiz_service.build_request("CELLS", "Easy", 5, "English")))
        assert len(smaller) == 5
        assert len(fake_generator.calls) == calls

    def test_insufficient_cache_regenerates_and_extends(self, quiz_service, fake_generator):
        asyncio.run(quiz_service.generate_questions(quiz_service.build_request("Cells", "easy", 5, "english")))
        calls = len(fake_generator.calls)

        larger = asyncio.run(quiz_service.generate_questions(quiz_service.build_request("Cells", "easy", 20, "english")))
        assert len(larger) == 20
        assert len(fake_generator.calls) > calls
        assert len(quiz_service.cache.get("Cells", "easy", "english")) == 20

    def test_shorter_result_does_not_replace_cached_set(self, make_generator, payload, fake_clock):
        generator = make_generator(lambda i, n: payload(min(n, 3), start=i * 100))
        cache = ResultCache(ttl_seconds=3600, clock=fake_clock)
        cached = seed_cache(cache, payload(10, start=900))
        service = QuizService(cache, BatchOrchestrator(generator))

        result = asyncio.run(service.generate_questions(service.build_request("Cells", "easy", 20, "english")))
        assert len(result) == 6
        assert cache.get("Cells", "easy", "english") == cached

    def test_empty_result_is_not_cached(self, make_generator, quiz_service):
        quiz_service.orchestrator.client = make_generator(lambda i, n: UpstreamUnavailable("down"))
        result = asyncio.run(quiz_service.generate_questions(quiz_service.build_request("Cells", "easy", 5, "english")))
        assert result == []
        assert quiz_service.cache.get("Cells", "easy", "english") is None

    def test_cache_hit_is_published_as_single_batch(self, quiz_service):
        request = quiz_service.build_request("Cells", "easy", 10, "english")
        asyncio.run(quiz_service.generate_questions(request))

        received = []
        asyncio.run(quiz_service.generate_questions(request, on_batch=received.append))
        assert len(received) == 1
        assert (received[0].index, received[0].total_batches, len(received[0].questions)) == (0, 1, 10)

    def test_unconfigured_client_fails_before_work(self, quiz_service, fake_generator):
        fake_generator.is_configured = False
        request = quiz_service.build_request("Cells", "easy", 5, "english")
        with pytest.raises(UpstreamUnavailable):
            asyncio.run(quiz_service.generate_questions(request))
        assert fake_generator.calls == []

