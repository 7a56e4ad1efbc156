"""Response cache for registry requests."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60 * 60  # seconds
DEFAULT_CACHE_FILE = Path.home() / ".depscope" / "cache.json"


class ResponseCache(Protocol):
    """Key/value store for decoded responses with per-entry expiry."""

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        ...

    def set(self, key: str, value: Any, ttl: float = DEFAULT_TTL) -> None:
        """Store a value for ``ttl`` seconds."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...


class MemoryCache:
    """In-process cache, discarded when the process exits."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() > expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float = DEFAULT_TTL) -> None:
        self._entries[key] = (value, self._clock() + ttl)

    def clear(self) -> None:
        self._entries.clear()


class DiskCache:
    """Cache persisted as a single JSON file.

    File layout: ``{key: {"value": ..., "expires_at": <epoch seconds>}}``.
    The cache is best-effort: an unreadable file behaves as an empty cache
    and write failures are logged and ignored.
    """

    def __init__(
        self,
        path: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = path or DEFAULT_CACHE_FILE
        self._clock = clock

    def _read(self) -> dict[str, Any]:
        try:
            if not self.path.exists():
                return {}
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.debug(f"Ignoring unreadable cache file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.debug(f"Could not write cache file {self.path}: {e}")

    def get(self, key: str) -> Any | None:
        entries = self._read()
        if key not in entries:
            return None
        entry = entries[key]
        expires_at = entry.get("expires_at") if isinstance(entry, dict) else None
        # bool is an int subclass but never a timestamp
        if (
            not isinstance(expires_at, (int, float))
            or isinstance(expires_at, bool)
            or self._clock() > expires_at
        ):
            # Expired or malformed, evict it
            del entries[key]
            self._write(entries)
            return None
        return entry.get("value")

    def set(self, key: str, value: Any, ttl: float = DEFAULT_TTL) -> None:
        entries = self._read()
        entries[key] = {"value": value, "expires_at": self._clock() + ttl}
        self._write(entries)

    def clear(self) -> None:
        self._write({})
