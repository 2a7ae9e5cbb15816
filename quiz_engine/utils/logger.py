# quiz_engine/utils/logger.py
import logging
import sys
from quiz_engine.utils.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# HTTP client loggers used by the LLM providers; each batch call would log a request line.
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def configure_logging(level_name: str = settings.log_level) -> logging.Logger:
    """Sets up the service logger with one stdout handler; safe to call again on reload."""
    service_logger = logging.getLogger("quiz_engine")
    service_logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))

    if service_logger.hasHandlers():
        service_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    service_logger.addHandler(handler)
    service_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return service_logger


logger = configure_logging()
