# tests/conftest.py
import asyncio
import json
import logging
import os
import sys

import pytest
from fastapi.testclient import TestClient

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quiz_engine.services.batch_orchestrator import BatchOrchestrator
from quiz_engine.services.quiz_service import QuizService, get_quiz_service
from quiz_engine.services.result_cache import ResultCache


def questions_payload(count: int, start: int = 0, prefix: str = "Question") -> str:
    """JSON array of `count` valid, distinct questions numbered from `start`."""
    return json.dumps([
        {
            "question": f"{prefix} {n}: which option is correct?",
            "options": [f"Right {n}", f"Wrong {n}a", f"Wrong {n}b", f"Wrong {n}c"],
            "answer": f"Right {n}",
            "explanation": f"Right {n} is correct.",
        }
        for n in range(start, start + count)
    ])


class FakeGenerator:
    """
    Stands in for GenerationClient. `responder(call_index, count)` returns the
    raw text for a call, or an exception instance to raise. By default every
    call returns fresh, unique questions.
    """
    is_configured = True

    def __init__(self, responder=None, delay: float = 0.01):
        self.responder = responder or self.unique_questions
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._issued = 0

    def unique_questions(self, call_index: int, count: int) -> str:
        start = self._issued
        self._issued += count
        return questions_payload(count, start)

    async def generate(self, topic, difficulty, count, language):
        call_index = len(self.calls)
        self.calls.append(count)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            result = self.responder(call_index, count)
        finally:
            self.in_flight -= 1
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def make_generator():
    """Factory for FakeGenerator instances with a custom responder."""
    return FakeGenerator


@pytest.fixture
def payload():
    return questions_payload


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def quiz_service(fake_generator, fake_clock):
    cache = ResultCache(ttl_seconds=3600, max_entries=10, clock=fake_clock)
    return QuizService(cache=cache, orchestrator=BatchOrchestrator(fake_generator),
                       default_batch_size=10, default_parallel=3)


# --- TestClient Fixture ---
@pytest.fixture(scope="session")
def client():
    """
    Creates the TestClient for the session; app startup builds the real
    service graph, which individual tests replace through dependency overrides.
    """
    from quiz_engine.main import app
    logger.info("Creating TestClient instance for the session.")
    with TestClient(app) as c:
        yield c


@pytest.fixture
def api_client(client, quiz_service):
    """TestClient whose quiz endpoints are served by the fake-backed quiz_service."""
    app = client.app
    app.dependency_overrides[get_quiz_service] = lambda: quiz_service
    yield client
    app.dependency_overrides.clear()
