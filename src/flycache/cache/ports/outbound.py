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
"""Outbound ports: cache drivers and the search-index backend client."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from flycache.cache.types import Acknowledgement, CacheStats, FetchResult, GetResult, StorageLocation


@runtime_checkable
class CacheDriver(Protocol):
    """Storage-specific half of a cache provider.

    All drivers (search index, Redis, in-memory, etc.) implement this
    capability set. Keys arrive already namespaced by the provider; values
    arrive unserialized. Serving-path hooks report failure through their
    return value rather than by raising.
    """

    async def do_fetch(self, key: str) -> FetchResult: ...

    async def do_contains(self, key: str) -> bool: ...

    async def do_save(self, key: str, value: Any, ttl: float | None = None) -> bool: ...

    async def do_delete(self, key: str) -> bool: ...

    async def do_flush(self) -> bool: ...

    async def do_get_stats(self) -> CacheStats | None: ...


@runtime_checkable
class SearchIndexClient(Protocol):
    """Document store addressed by (index, document type, document id).

    Implementations decode backend responses into typed results and raise
    ``flycache.kernel.exceptions`` faults: ``EntryNotFoundException`` for a
    missing document or index, ``BackendUnavailableException`` for transport
    failures, ``CacheBackendException`` otherwise. ``create_index`` receives a
    backend-neutral field schema (``{"properties": {name: {"type": ...}}}``).
    """

    async def get(self, location: StorageLocation, source_includes: Sequence[str] | None = None) -> GetResult: ...

    async def exists(self, location: StorageLocation) -> bool: ...

    async def upsert(self, location: StorageLocation, fields: dict[str, Any]) -> Acknowledgement: ...

    async def delete(self, location: StorageLocation) -> Acknowledgement: ...

    async def delete_index(self, index: str) -> Acknowledgement: ...

    async def create_index(self, index: str, doc_type: str, schema: dict[str, Any]) -> dict[str, Any]: ...
