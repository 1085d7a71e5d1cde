import logging
import threading
from collections import deque
from typing import Deque, Dict, List, Optional, Union

REDACTED_KEYS = {"secret_key", "client_secret", "api_key", "access_token", "authorization"}


class RingBufferHandler(logging.Handler):
    def __init__(self, max_entries: int = 200):
        super().__init__()
        self.max_entries = max_entries
        self._events: Deque[Dict] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        event = {
            "event": record.getMessage(),
            "level": record.levelname,
            "logger": record.name,
            "ts": record.created,
            "details": redact(getattr(record, "details", {})),
        }
        with self._lock:
            self._events.append(event)

    def get_events(self) -> List[Dict]:
        with self._lock:
            return list(self._events)


class DetailsFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        details = redact(getattr(record, "details", {}))
        if details:
            line = f"{line} {details}"
        return line


def create_logger(name: str, ring_size: int = 200, level: Union[int, str] = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)
    ring = RingBufferHandler(max_entries=ring_size)
    stream = logging.StreamHandler()
    formatter = DetailsFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    ring.setFormatter(formatter)
    stream.setFormatter(formatter)
    logger.addHandler(ring)
    logger.addHandler(stream)
    logger.propagate = False
    return logger


def get_ring_buffer(logger: logging.Logger) -> Optional[RingBufferHandler]:
    for handler in logger.handlers:
        if isinstance(handler, RingBufferHandler):
            return handler
    return None


def redact(details: Optional[dict]) -> dict:
    if not details:
        return {}
    cleaned = {}
    for key, value in details.items():
        if key in REDACTED_KEYS:
            cleaned[key] = "***"
        else:
            cleaned[key] = value
    return cleaned
