# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""In-process cache driver."""

from __future__ import annotations

import logging
import time
from typing import Any

from flycache.cache.serialization import (
    DESERIALIZATION_ERRORS,
    SERIALIZATION_ERRORS,
    PickleSerializer,
    Serializer,
)
from flycache.cache.types import NOT_FOUND, CacheStats, FetchResult, Found

_logger = logging.getLogger(__name__)


class InMemoryCacheDriver:
    """Dict-backed cache driver with optional TTL support.

    Suitable for development, testing, and single-process applications.
    Values are kept serialized, so callers never share mutable state with
    the cache.
    """

    def __init__(self, serializer: Serializer | None = None) -> None:
        self._serializer = serializer or PickleSerializer()
        self._store: dict[str, tuple[str, float | None]] = {}
        self._hits = 0
        self._misses = 0
        self._started_at = time.monotonic()

    def _live_payload(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if expires_at is not None and time.monotonic() > expires_at:
            del self._store[key]
            return None
        return payload

    async def do_fetch(self, key: str) -> FetchResult:
        payload = self._live_payload(key)
        if payload is None:
            self._misses += 1
            return NOT_FOUND
        try:
            value = self._serializer.deserialize(payload)
        except DESERIALIZATION_ERRORS:
            _logger.warning("Failed to deserialize cached value for key '%s'", key)
            self._misses += 1
            return NOT_FOUND
        self._hits += 1
        return Found(value)

    async def do_contains(self, key: str) -> bool:
        return self._live_payload(key) is not None

    async def do_save(self, key: str, value: Any, ttl: float | None = None) -> bool:
        try:
            payload = self._serializer.serialize(value)
        except SERIALIZATION_ERRORS as exc:
            _logger.warning("Failed to serialize cache entry '%s': %s", key, exc)
            return False
        expires_at = time.monotonic() + ttl if ttl else None
        self._store[key] = (payload, expires_at)
        return True

    async def do_delete(self, key: str) -> bool:
        self._store.pop(key, None)
        return True

    async def do_flush(self) -> bool:
        self._store.clear()
        return True

    async def do_get_stats(self) -> CacheStats | None:
        """Hit/miss counters, uptime, and the live entry count as memory usage."""
        live = sum(1 for key in list(self._store) if self._live_payload(key) is not None)
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            uptime=time.monotonic() - self._started_at,
            memory_usage=live,
            memory_available=None,
        )
