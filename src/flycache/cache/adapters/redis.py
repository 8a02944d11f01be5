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
"""Redis-backed cache driver."""

from __future__ import annotations

import logging
import math
from typing import Any

from redis.exceptions import RedisError

from flycache.cache.serialization import (
    DESERIALIZATION_ERRORS,
    SERIALIZATION_ERRORS,
    PickleSerializer,
    Serializer,
)
from flycache.cache.types import NOT_FOUND, BackendError, CacheStats, FetchResult, Found

_logger = logging.getLogger(__name__)


class RedisCacheDriver:
    """Cache driver that delegates to a ``redis.asyncio.Redis``-like client.

    Values are serialized to a string payload before storage; lifetimes are
    forwarded to Redis as whole seconds (rounded up) so expiry is enforced
    by the server.
    """

    def __init__(self, client: Any, serializer: Serializer | None = None) -> None:
        self._client = client
        self._serializer = serializer or PickleSerializer()

    async def do_fetch(self, key: str) -> FetchResult:
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            return BackendError(exc)
        if not raw:
            return NOT_FOUND
        try:
            payload = raw.decode() if isinstance(raw, bytes) else raw
            return Found(self._serializer.deserialize(payload))
        except DESERIALIZATION_ERRORS:
            _logger.warning("Failed to deserialize cached value for key '%s'", key)
            return NOT_FOUND

    async def do_contains(self, key: str) -> bool:
        try:
            count = await self._client.exists(key)
        except RedisError as exc:
            _logger.debug("EXISTS failed for '%s': %s", key, exc)
            return False
        return bool(count > 0)

    async def do_save(self, key: str, value: Any, ttl: float | None = None) -> bool:
        try:
            raw = self._serializer.serialize(value)
        except SERIALIZATION_ERRORS as exc:
            _logger.warning("Failed to serialize cache entry '%s': %s", key, exc)
            return False
        ex = math.ceil(ttl) if ttl else None
        try:
            return bool(await self._client.set(key, raw.encode(), ex=ex))
        except RedisError as exc:
            _logger.warning("SET failed for '%s': %s", key, exc)
            return False

    async def do_delete(self, key: str) -> bool:
        # DEL of a missing key answers 0; that is still a successful delete.
        try:
            await self._client.delete(key)
        except RedisError as exc:
            _logger.warning("DEL failed for '%s': %s", key, exc)
            return False
        return True

    async def do_flush(self) -> bool:
        """Flush the entire Redis database."""
        try:
            return bool(await self._client.flushdb())
        except RedisError as exc:
            _logger.warning("FLUSHDB failed: %s", exc)
            return False

    async def do_get_stats(self) -> CacheStats | None:
        info = await self._client.info()
        return CacheStats(
            hits=info.get("keyspace_hits"),
            misses=info.get("keyspace_misses"),
            uptime=info.get("uptime_in_seconds"),
            memory_usage=info.get("used_memory"),
            memory_available=info.get("maxmemory"),
        )

    async def start(self) -> None:
        """Validate connectivity by pinging Redis."""
        await self._client.ping()

    async def stop(self) -> None:
        """Close the underlying Redis connection."""
        await self._client.aclose()
