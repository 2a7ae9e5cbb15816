# Recovers a list of question records from free-form LLM output
# quiz_engine/services/response_parser.py
import json
import re
from typing import Any, Callable, Dict, List, Tuple

from quiz_engine.utils.exceptions import MalformedResponse
from quiz_engine.utils.logger import logger

# Returned by an attempt that could not produce a JSON list or object.
NO_PARSE = object()

_FENCE_START = re.compile(r"^```[a-zA-Z]*[ \t]*\n?")
_FENCE_END = re.compile(r"\n?```\s*$")
_OBJECT_BOUNDARY = re.compile(r"}\s*{")


def strip_code_fence(text: str) -> str:
    """Removes a markdown code fence wrapped around the payload, if any."""
    text = text.strip()
    text = _FENCE_START.sub("", text, count=1)
    text = _FENCE_END.sub("", text, count=1)
    return text.strip()


def _loads_structure(text: str) -> Any:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return NO_PARSE
    if isinstance(parsed, (list, dict)):
        return parsed
    return NO_PARSE


def attempt_direct(text: str) -> Any:
    return _loads_structure(text)


def attempt_concatenated_objects(text: str) -> Any:
    """Handles `{...}{...}` output that was never wrapped in an array."""
    if text.startswith("[") or not _OBJECT_BOUNDARY.search(text):
        return NO_PARSE
    return _loads_structure("[" + _OBJECT_BOUNDARY.sub("},{", text) + "]")


def attempt_array_slice(text: str) -> Any:
    start, end = text.find("["), text.rfind("]")
    if start == -1 or end <= start:
        return NO_PARSE
    parsed = _loads_structure(text[start:end + 1])
    # A list of scalars is a nested value (e.g. a lone object's options), not a record set.
    if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
        return NO_PARSE
    return parsed


def attempt_object_slice(text: str) -> Any:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return NO_PARSE
    parsed = _loads_structure(text[start:end + 1])
    return parsed if isinstance(parsed, dict) else NO_PARSE


ATTEMPTS: Tuple[Callable[[str], Any], ...] = (
    attempt_direct,
    attempt_concatenated_objects,
    attempt_array_slice,
    attempt_object_slice,
)


class ResponseRecoveryParser:
    """
    Parses LLM output that is supposed to be a JSON array of questions.
    Each attempt in ATTEMPTS is tried in order on the fence-stripped text and
    the first one that yields a list or object wins.
    """

    def __init__(self, attempts: Tuple[Callable[[str], Any], ...] = ATTEMPTS):
        self.attempts = attempts

    def parse(self, raw: str) -> List[Dict[str, Any]]:
        text = strip_code_fence(str(raw))
        for attempt in self.attempts:
            parsed = attempt(text)
            if parsed is NO_PARSE:
                continue
            if attempt is not attempt_direct:
                logger.debug(f"Recovered LLM response using '{attempt.__name__}'")
            return parsed if isinstance(parsed, list) else [parsed]

        logger.error(f"Failed to parse LLM response: {raw!r}")
        raise MalformedResponse(raw)


response_parser = ResponseRecoveryParser()
