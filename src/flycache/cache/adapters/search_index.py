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
"""Search-index cache driver.

Each cache entry is one document ``{"data": <payload>}`` in the index
``index`` under the document type ``doc_type``, with the md5 hex digest of
the key as document id. Entries saved with a finite lifetime also carry
``expires_at`` (a UTC datetime), checked at read time.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from flycache.cache.ports.outbound import SearchIndexClient
from flycache.cache.serialization import (
    DESERIALIZATION_ERRORS,
    SERIALIZATION_ERRORS,
    PickleSerializer,
    Serializer,
)
from flycache.cache.types import (
    NOT_FOUND,
    BackendError,
    CacheStats,
    FetchResult,
    Found,
    StorageLocation,
)
from flycache.kernel.exceptions import (
    AcknowledgmentMissingException,
    CacheBackendException,
    EmptyPayloadException,
    EntryNotFoundException,
)
from flycache.kernel.lifecycle import Lifecycle

_logger = logging.getLogger(__name__)

DATA_FIELD = "data"
EXPIRES_FIELD = "expires_at"

DEFAULT_INDEX = "doctrine"
DEFAULT_TYPE = "cache"


class SearchIndexCacheDriver:
    """Cache driver storing entries as documents of a remote search index."""

    def __init__(
        self,
        client: SearchIndexClient,
        index: str = DEFAULT_INDEX,
        doc_type: str = DEFAULT_TYPE,
        serializer: Serializer | None = None,
        enforce_ttl: bool = True,
    ) -> None:
        self._client = client
        self._index = str(index)
        self._type = str(doc_type)
        self._serializer = serializer or PickleSerializer()
        self._enforce_ttl = enforce_ttl

    @property
    def index(self) -> str:
        return self._index

    @property
    def doc_type(self) -> str:
        return self._type

    def set_index(self, index: str) -> None:
        self._index = str(index)

    def set_type(self, doc_type: str) -> None:
        self._type = str(doc_type)

    def location(self, key: str) -> StorageLocation:
        return StorageLocation.for_key(key, self._index, self._type)

    async def create_cache_index(self) -> dict[str, Any]:
        """Create the cache index with an opaque, non-analyzed ``data`` field.

        Provisioning only: backend faults propagate to the caller, and a
        response without ``acknowledged`` raises
        :class:`AcknowledgmentMissingException`.
        """
        location = self.location("")
        properties: dict[str, Any] = {DATA_FIELD: {"type": "string", "analyzed": False}}
        if self._enforce_ttl:
            properties[EXPIRES_FIELD] = {"type": "date", "expires": True}
        response = await self._client.create_index(location.index, location.doc_type, {"properties": properties})
        if not response.get("acknowledged"):
            raise AcknowledgmentMissingException(
                f"Backend did not acknowledge creation of index '{location.index}'",
                code="CACHE_INDEX_NOT_ACKNOWLEDGED",
                context={"index": location.index, "type": location.doc_type, "response": response},
            )
        _logger.info("Created cache index '%s' for type '%s'", location.index, location.doc_type)
        return response

    # ------------------------------------------------------------------
    # CacheDriver
    # ------------------------------------------------------------------

    async def do_fetch(self, key: str) -> FetchResult:
        location = self.location(key)
        try:
            response = await self._client.get(location)
        except EntryNotFoundException:
            _logger.debug("Cache miss for document '%s' in '%s'", location.doc_id, location.index)
            return NOT_FOUND
        except CacheBackendException as exc:
            return BackendError(exc)

        if not response.found:
            return NOT_FOUND
        payload = response.source.get(DATA_FIELD)
        if not payload:
            return BackendError(
                EmptyPayloadException(
                    f"Document '{location.doc_id}' in '{location.index}' has no payload",
                    code="CACHE_EMPTY_PAYLOAD",
                    context={"key": key},
                )
            )
        try:
            expired = self._is_expired(response.source)
        except (TypeError, ValueError, OverflowError) as exc:
            return BackendError(
                CacheBackendException(
                    f"Document '{location.doc_id}' in '{location.index}' has an unreadable expiry: {exc}",
                    code="CACHE_INVALID_EXPIRY",
                    context={"key": key, "expires_at": response.source.get(EXPIRES_FIELD)},
                )
            )
        if expired:
            _logger.debug("Cache entry '%s' expired", location.doc_id)
            return NOT_FOUND

        try:
            return Found(self._serializer.deserialize(payload))
        except DESERIALIZATION_ERRORS:
            _logger.warning("Failed to deserialize cached value for key '%s'", key)
            return NOT_FOUND

    async def do_contains(self, key: str) -> bool:
        location = self.location(key)
        try:
            if not self._enforce_ttl:
                return bool(await self._client.exists(location))
            response = await self._client.get(location, source_includes=[DATA_FIELD, EXPIRES_FIELD])
        except CacheBackendException as exc:
            _logger.debug("Existence check for '%s' failed: %s", location.doc_id, exc)
            return False
        try:
            return response.found and bool(response.source.get(DATA_FIELD)) and not self._is_expired(response.source)
        except (TypeError, ValueError, OverflowError):
            _logger.warning("Unreadable expiry on cache document '%s'", location.doc_id)
            return False

    async def do_save(self, key: str, value: Any, ttl: float | None = None) -> bool:
        try:
            fields: dict[str, Any] = {DATA_FIELD: self._serializer.serialize(value)}
        except SERIALIZATION_ERRORS as exc:
            _logger.warning("Failed to serialize cache entry '%s': %s", key, exc)
            return False
        if self._enforce_ttl and ttl:
            fields[EXPIRES_FIELD] = _expiry(ttl)

        try:
            ack = await self._client.upsert(self.location(key), fields)
        except CacheBackendException as exc:
            _logger.warning("Failed to index cache entry '%s': %s", key, exc)
            return False
        return ack.acknowledged

    async def do_delete(self, key: str) -> bool:
        try:
            ack = await self._client.delete(self.location(key))
        except EntryNotFoundException:
            return True
        except CacheBackendException as exc:
            _logger.warning("Failed to delete cache entry '%s': %s", key, exc)
            return False
        return ack.acknowledged

    async def do_flush(self) -> bool:
        # Drops the whole index, including every other type stored in it.
        index = self._index.lower()
        try:
            ack = await self._client.delete_index(index)
        except EntryNotFoundException:
            return True
        except CacheBackendException as exc:
            _logger.warning("Failed to delete cache index '%s': %s", index, exc)
            return False
        return ack.acknowledged

    async def do_get_stats(self) -> CacheStats | None:
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if isinstance(self._client, Lifecycle):
            await self._client.start()

    async def stop(self) -> None:
        if isinstance(self._client, Lifecycle):
            await self._client.stop()

    @staticmethod
    def _is_expired(source: dict[str, Any]) -> bool:
        expires_at = source.get(EXPIRES_FIELD)
        if expires_at is None:
            return False
        if isinstance(expires_at, str):
            expires_at = datetime.fromisoformat(expires_at)
        if isinstance(expires_at, datetime):
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            return _utcnow() >= expires_at
        return _utcnow().timestamp() >= float(expires_at)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _expiry(ttl: float) -> datetime:
    """Absolute expiry *ttl* seconds from now, clamped to the latest representable instant."""
    try:
        return _utcnow() + timedelta(seconds=ttl)
    except OverflowError:
        return datetime.max.replace(tzinfo=timezone.utc)
