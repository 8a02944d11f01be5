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
"""Shared fixtures for cache tests: an in-memory SearchIndexClient stand-in."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from flycache.cache.adapters.memory import InMemoryCacheDriver
from flycache.cache.adapters.search_index import SearchIndexCacheDriver
from flycache.cache.provider import CacheProvider
from flycache.cache.types import Acknowledgement, GetResult, StorageLocation
from flycache.kernel.exceptions import EntryNotFoundException


class FakeSearchIndex:
    """Minimal in-memory stub matching the SearchIndexClient port.

    ``failure`` makes every call raise; ``acknowledge = False`` makes writes
    answer without an acknowledgment (and without applying them).
    """

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, dict[str, dict[str, Any]]]] = {}
        self.calls: list[tuple[str, Any, Any]] = []
        self.failure: Exception | None = None
        self.acknowledge = True

    def _record(self, operation: str, target: Any, extra: Any = None) -> None:
        self.calls.append((operation, target, extra))
        if self.failure is not None:
            raise self.failure

    def _documents(self, location: StorageLocation) -> dict[str, dict[str, Any]]:
        return self.indices.setdefault(location.index, {}).setdefault(location.doc_type, {})

    def put_document(self, location: StorageLocation, source: dict[str, Any]) -> None:
        self._documents(location)[location.doc_id] = dict(source)

    def document(self, location: StorageLocation) -> dict[str, Any] | None:
        return self.indices.get(location.index, {}).get(location.doc_type, {}).get(location.doc_id)

    async def get(self, location: StorageLocation, source_includes: Sequence[str] | None = None) -> GetResult:
        self._record("get", location, source_includes)
        source = self.document(location)
        if source is None:
            raise EntryNotFoundException(f"{location.doc_id} not found")
        if source_includes is not None:
            source = {k: v for k, v in source.items() if k in source_includes}
        return GetResult(found=True, source=dict(source))

    async def exists(self, location: StorageLocation) -> bool:
        self._record("exists", location)
        return self.document(location) is not None

    async def upsert(self, location: StorageLocation, fields: dict[str, Any]) -> Acknowledgement:
        self._record("upsert", location, fields)
        if self.acknowledge:
            self.put_document(location, fields)
        return Acknowledgement(acknowledged=self.acknowledge)

    async def delete(self, location: StorageLocation) -> Acknowledgement:
        self._record("delete", location)
        if self.document(location) is None:
            raise EntryNotFoundException(f"{location.doc_id} not found")
        if self.acknowledge:
            del self.indices[location.index][location.doc_type][location.doc_id]
        return Acknowledgement(acknowledged=self.acknowledge)

    async def delete_index(self, index: str) -> Acknowledgement:
        self._record("delete_index", index)
        if index not in self.indices:
            raise EntryNotFoundException(f"index {index} not found")
        if self.acknowledge:
            del self.indices[index]
        return Acknowledgement(acknowledged=self.acknowledge)

    async def create_index(self, index: str, doc_type: str, schema: dict[str, Any]) -> dict[str, Any]:
        self._record("create_index", (index, doc_type), schema)
        self.indices.setdefault(index, {}).setdefault(doc_type, {})
        return {"acknowledged": self.acknowledge, "index": index}


@pytest.fixture
def index_client() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest.fixture
def search_driver(index_client: FakeSearchIndex) -> SearchIndexCacheDriver:
    return SearchIndexCacheDriver(index_client)


@pytest.fixture
def search_provider(search_driver: SearchIndexCacheDriver) -> CacheProvider:
    return CacheProvider(search_driver)


@pytest.fixture
def memory_provider() -> CacheProvider:
    return CacheProvider(InMemoryCacheDriver())
