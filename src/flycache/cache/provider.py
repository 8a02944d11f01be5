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
"""Cache provider: the public cache API over a pluggable driver."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from flycache.cache.ports.outbound import CacheDriver
from flycache.cache.types import TTL, BackendError, CacheEntry, CacheStats, Found, ttl_seconds
from flycache.kernel.lifecycle import Lifecycle

logger = logging.getLogger(__name__)

NAMESPACE_CACHE_KEY = "FlyCacheNamespaceCacheKey[{}]"


class CacheProvider:
    """Public cache API shared by every driver.

    The provider owns the caller-facing policy: optional logical namespacing
    of keys, lifetime normalization, and degrading backend failures to cache
    misses (``fetch``/``contains``) or ``False`` (writes). Storage-specific
    work is delegated to the wrapped :class:`CacheDriver`.

    Usage:
        provider = CacheProvider(SearchIndexCacheDriver(client))
        await provider.save("user:42", {"name": "Ada"}, ttl=300)
        user = await provider.fetch("user:42")
    """

    def __init__(self, driver: CacheDriver, namespace: str = "") -> None:
        self._driver = driver
        self._namespace = str(namespace)
        self._namespace_version: int | None = None

    @property
    def driver(self) -> CacheDriver:
        return self._driver

    @property
    def namespace(self) -> str:
        return self._namespace

    def set_namespace(self, namespace: str) -> None:
        """Switch the logical namespace; the stored version is re-read lazily."""
        self._namespace = str(namespace)
        self._namespace_version = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch(self, key: str) -> Any | None:
        """Return the cached value for *key*, or ``None`` on a miss or backend failure."""
        try:
            result = await self._driver.do_fetch(await self._namespaced_key(key))
        except Exception as exc:
            logger.warning("Cache FETCH failed for '%s', treating as miss: %s", key, exc)
            return None

        if isinstance(result, Found):
            return result.value
        if isinstance(result, BackendError):
            logger.warning("Cache backend error on FETCH '%s', treating as miss: %s", key, result.cause)
        return None

    async def fetch_many(self, keys: Iterable[str]) -> dict[str, Any]:
        """Fetch several keys; only hits appear in the returned mapping."""
        found: dict[str, Any] = {}
        for key in keys:
            try:
                result = await self._driver.do_fetch(await self._namespaced_key(key))
            except Exception as exc:
                logger.warning("Cache FETCH failed for '%s', treating as miss: %s", key, exc)
                continue
            if isinstance(result, Found):
                found[key] = result.value
            elif isinstance(result, BackendError):
                logger.warning("Cache backend error on FETCH '%s', treating as miss: %s", key, result.cause)
        return found

    async def contains(self, key: str) -> bool:
        """Whether a live entry exists for *key*."""
        try:
            return bool(await self._driver.do_contains(await self._namespaced_key(key)))
        except Exception as exc:
            logger.warning("Cache CONTAINS failed for '%s', treating as absent: %s", key, exc)
            return False

    async def save(self, key: str, value: Any, ttl: TTL = 0) -> bool:
        """Store *value* under *key*. ``ttl`` of 0 or ``None`` never expires.

        Returns ``True`` only when the backend acknowledged the write.
        """
        try:
            return bool(await self._driver.do_save(await self._namespaced_key(key), value, ttl_seconds(ttl)))
        except Exception as exc:
            logger.warning("Cache SAVE failed for '%s': %s", key, exc)
            return False

    async def save_many(self, items: Mapping[str, Any], ttl: TTL = 0) -> bool:
        """Save every item; ``True`` only if all writes were acknowledged."""
        success = True
        for key, value in items.items():
            success = await self.save(key, value, ttl) and success
        return success

    async def save_entry(self, entry: CacheEntry) -> bool:
        return await self.save(entry.key, entry.value, entry.ttl)

    async def delete(self, key: str) -> bool:
        """Remove *key*. Deleting an absent key counts as success."""
        try:
            return bool(await self._driver.do_delete(await self._namespaced_key(key)))
        except Exception as exc:
            logger.warning("Cache DELETE failed for '%s': %s", key, exc)
            return False

    async def delete_all(self) -> bool:
        """Invalidate every entry of the current logical namespace.

        Bumps the namespace version so previously written keys are no longer
        addressed; the stale entries stay in the backend. Without a logical
        namespace this is :meth:`flush`.
        """
        if not self._namespace:
            return await self.flush()

        try:
            version = await self._get_namespace_version() + 1
            saved = bool(await self._driver.do_save(self._namespace_cache_key(), version, None))
        except Exception as exc:
            logger.warning("Cache DELETE ALL failed for namespace '%s': %s", self._namespace, exc)
            return False
        if saved:
            self._namespace_version = version
        return saved

    async def flush(self) -> bool:
        """Remove every entry reachable by the driver. Backend-wide and destructive."""
        try:
            flushed = bool(await self._driver.do_flush())
        except Exception as exc:
            logger.warning("Cache FLUSH failed: %s", exc)
            return False
        if flushed:
            self._namespace_version = None
        return flushed

    async def get_stats(self) -> CacheStats | None:
        """Backend statistics, or ``None`` when the driver does not report any."""
        return await self._driver.do_get_stats()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if isinstance(self._driver, Lifecycle):
            await self._driver.start()

    async def stop(self) -> None:
        if isinstance(self._driver, Lifecycle):
            await self._driver.stop()

    # ------------------------------------------------------------------
    # Namespacing
    # ------------------------------------------------------------------

    def _namespace_cache_key(self) -> str:
        return NAMESPACE_CACHE_KEY.format(self._namespace)

    async def _namespaced_key(self, key: str) -> str:
        if not self._namespace:
            return key
        version = await self._get_namespace_version()
        return f"{self._namespace}[{key}][{version}]"

    async def _get_namespace_version(self) -> int:
        if self._namespace_version is not None:
            return self._namespace_version

        result = await self._driver.do_fetch(self._namespace_cache_key())
        if isinstance(result, BackendError):
            # not cached: the stored version is picked up once the backend recovers
            return 1
        version = 1
        if isinstance(result, Found) and isinstance(result.value, int):
            version = result.value
        self._namespace_version = version
        return version
