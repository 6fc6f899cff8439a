import re
import time
from collections.abc import Callable

from app.core.constants import FALLBACK_FILE_NAME

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(file_name: str) -> str:
    return _UNSAFE_CHARS.sub("_", file_name or "")


def build_object_path(namespace: str, timestamp_ms: int, file_name: str) -> str:
    safe_name = sanitize_filename(file_name) or FALLBACK_FILE_NAME
    return f"{namespace.strip('/')}/{timestamp_ms}-{safe_name}"


def wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class PathResolver:
    def __init__(self, namespace: str, clock: Callable[[], int] = wall_clock_ms) -> None:
        self.namespace = namespace
        self.clock = clock
        self._last_ms = 0

    def next_timestamp(self) -> int:
        now = self.clock()
        if now <= self._last_ms:
            now = self._last_ms + 1
        self._last_ms = now
        return now

    def resolve(self, file_name: str) -> str:
        return build_object_path(self.namespace, self.next_timestamp(), file_name)
