# Pushes batch completions to a remote subscriber as server-sent events
# quiz_engine/services/stream_publisher.py
import asyncio
import json
from typing import AsyncIterator, Tuple

from quiz_engine.models.question import BatchResult, GenerationRequest
from quiz_engine.utils.exceptions import UpstreamUnavailable
from quiz_engine.utils.logger import logger

TERMINAL_EVENTS = ("done", "error")


def format_sse(event: str, payload: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


class StreamPublisher:
    """
    Queues batch/done/error events for one streaming response.

    Publishing is fire-and-forget: once the subscriber has gone away every
    publish call is a no-op and the producer is never blocked.
    """

    def __init__(self):
        self._queue: "asyncio.Queue[Tuple[str, dict]]" = asyncio.Queue()
        self.connected = True
        self.finished = False

    def _push(self, event: str, payload: dict) -> None:
        if not self.connected or self.finished:
            return
        if event in TERMINAL_EVENTS:
            self.finished = True
        self._queue.put_nowait((event, payload))

    def publish_batch(self, batch: BatchResult) -> None:
        self._push("batch", {
            "index": batch.index,
            "totalBatches": batch.total_batches,
            "count": len(batch.questions),
            "questions": [q.model_dump(mode="json") for q in batch.questions],
        })

    # Lets the publisher be handed to the orchestrator as its batch callback.
    __call__ = publish_batch

    def complete(self) -> None:
        self._push("done", {"message": "complete"})

    def fail(self, error: str) -> None:
        self._push("error", {"error": error})

    def disconnect(self) -> None:
        if self.connected:
            logger.info("Stream subscriber disconnected; further events are dropped.")
        self.connected = False

    async def events(self) -> AsyncIterator[str]:
        try:
            while True:
                event, payload = await self._queue.get()
                yield format_sse(event, payload)
                if event in TERMINAL_EVENTS:
                    break
        finally:
            self.disconnect()


async def run_with_publisher(quiz_service, request: GenerationRequest, publisher: StreamPublisher) -> None:
    """Runs a generation to completion, mirroring its progress onto `publisher`."""
    try:
        questions = await quiz_service.generate_questions(request, on_batch=publisher)
    except UpstreamUnavailable as e:
        logger.error(f"Streaming generation could not start: {e}")
        publisher.fail(str(e))
        return
    except Exception as e:
        logger.exception(f"Streaming generation failed: {e}")
        publisher.fail("Failed to generate quiz questions")
        return
    logger.info(f"Streaming generation finished with {len(questions)} questions")
    publisher.complete()
