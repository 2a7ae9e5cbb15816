# In-memory, TTL-bounded store of assembled question sets
# quiz_engine/services/result_cache.py
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from quiz_engine.models.question import QuestionRecord
from quiz_engine.utils.logger import logger

DEFAULT_TTL_SECONDS = 6 * 60 * 60
DEFAULT_MAX_ENTRIES = 200


def fingerprint(topic: str, difficulty: str, language: str) -> str:
    """Case- and whitespace-insensitive key for a topic/difficulty/language triple."""
    return "|".join(str(part).strip().lower() for part in (topic, difficulty, language))


@dataclass(frozen=True)
class CacheEntry:
    key: str
    questions: Tuple[QuestionRecord, ...]
    inserted_at: float


class ResultCache:
    """
    Maps a request fingerprint to the last question set generated for it.

    Entries expire `ttl_seconds` after insertion. When the store grows past
    `max_entries` the oldest-inserted entry is evicted; reads do not refresh
    an entry's position, so this is insertion-order eviction rather than LRU.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, max_entries: int = DEFAULT_MAX_ENTRIES,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        # dict preserves insertion order, which is the eviction order
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now - entry.inserted_at > self.ttl_seconds]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries.")

    def get(self, topic: str, difficulty: str, language: str) -> Optional[List[QuestionRecord]]:
        key = fingerprint(topic, difficulty, language)
        with self._lock:
            self._purge_expired()
            entry = self._entries.get(key)
        if entry is None:
            return None
        return list(entry.questions)

    def set(self, topic: str, difficulty: str, language: str, questions: Sequence[QuestionRecord]) -> None:
        key = fingerprint(topic, difficulty, language)
        with self._lock:
            self._purge_expired()
            # An overwrite counts as a fresh insertion.
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(key=key, questions=tuple(questions), inserted_at=self._clock())
            if len(self._entries) > self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug(f"Cache full, evicted oldest entry '{oldest}'.")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
