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
"""SearchIndexClient backed by MongoDB through Motor.

A :class:`StorageLocation` maps onto MongoDB as ``index`` → database,
``doc_type`` → collection and ``doc_id`` → ``_id``. Dropping the database
therefore removes every collection (type) sharing the index.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pymongo.errors import ConnectionFailure, PyMongoError

from flycache.cache.types import Acknowledgement, GetResult, StorageLocation
from flycache.kernel.exceptions import (
    BackendUnavailableException,
    CacheBackendException,
    EntryNotFoundException,
)

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

_logger = logging.getLogger(__name__)

# backend-neutral field types -> BSON types for the $jsonSchema validator
_BSON_TYPES = {"string": "string", "date": "date", "int": "int", "double": "double"}


@contextmanager
def _translate_errors(operation: str, target: str) -> Iterator[None]:
    context = {"operation": operation, "target": target}
    try:
        yield
    except ConnectionFailure as exc:
        raise BackendUnavailableException(
            f"MongoDB {operation} failed: {exc}", code="CACHE_BACKEND_UNAVAILABLE", context=context
        ) from exc
    except PyMongoError as exc:
        raise CacheBackendException(
            f"MongoDB {operation} rejected: {exc}", code="CACHE_BACKEND_ERROR", context=context
        ) from exc


def _target(location: StorageLocation) -> str:
    return f"{location.index}.{location.doc_type}/{location.doc_id}"


class MongoDocumentClient:
    """Adapts an ``AsyncIOMotorClient`` to the SearchIndexClient port."""

    def __init__(self, client: AsyncIOMotorClient) -> None:  # type: ignore[type-arg]
        self._client = client

    @classmethod
    def from_uri(cls, uri: str, **kwargs: Any) -> MongoDocumentClient:
        """Build a client for *uri*; *kwargs* go to ``AsyncIOMotorClient``."""
        from motor.motor_asyncio import AsyncIOMotorClient

        return cls(AsyncIOMotorClient(uri, **kwargs))

    def _collection(self, location: StorageLocation) -> AsyncIOMotorCollection:  # type: ignore[type-arg]
        return self._client[location.index][location.doc_type]

    async def get(self, location: StorageLocation, source_includes: Sequence[str] | None = None) -> GetResult:
        projection = {field: 1 for field in source_includes} if source_includes is not None else None
        with _translate_errors("find", _target(location)):
            document = await self._collection(location).find_one({"_id": location.doc_id}, projection)
        if document is None:
            raise EntryNotFoundException(
                f"Document '{_target(location)}' not found",
                code="CACHE_ENTRY_NOT_FOUND",
                context={"operation": "find", "target": _target(location)},
            )
        document.pop("_id", None)
        return GetResult(found=True, source=document)

    async def exists(self, location: StorageLocation) -> bool:
        with _translate_errors("count", _target(location)):
            count = await self._collection(location).count_documents({"_id": location.doc_id}, limit=1)
        return count > 0

    async def upsert(self, location: StorageLocation, fields: dict[str, Any]) -> Acknowledgement:
        with _translate_errors("replace", _target(location)):
            result = await self._collection(location).replace_one({"_id": location.doc_id}, fields, upsert=True)
        return Acknowledgement(
            acknowledged=bool(result.acknowledged),
            raw={"matched": result.matched_count, "upserted_id": result.upserted_id},
        )

    async def delete(self, location: StorageLocation) -> Acknowledgement:
        with _translate_errors("delete", _target(location)):
            result = await self._collection(location).delete_one({"_id": location.doc_id})
        if result.acknowledged and result.deleted_count == 0:
            raise EntryNotFoundException(
                f"Document '{_target(location)}' not found",
                code="CACHE_ENTRY_NOT_FOUND",
                context={"operation": "delete", "target": _target(location)},
            )
        return Acknowledgement(acknowledged=bool(result.acknowledged), raw={"deleted": result.deleted_count})

    async def delete_index(self, index: str) -> Acknowledgement:
        # dropDatabase answers nothing useful; reaching here means the server applied it.
        with _translate_errors("drop database", index):
            await self._client.drop_database(index)
        return Acknowledgement(acknowledged=True, raw={"dropped": index})

    async def create_index(self, index: str, doc_type: str, schema: dict[str, Any]) -> dict[str, Any]:
        """Create *doc_type* in *index* with a ``$jsonSchema`` validator.

        Fields flagged ``"expires": True`` also get a TTL index so the server
        purges expired entries on its own.
        """
        properties: dict[str, Any] = {}
        ttl_fields: list[str] = []
        for name, definition in schema.get("properties", {}).items():
            properties[name] = {"bsonType": _BSON_TYPES.get(definition.get("type", "string"), "string")}
            if definition.get("expires"):
                ttl_fields.append(name)
        validator = {"$jsonSchema": {"bsonType": "object", "properties": properties}}

        with _translate_errors("create collection", f"{index}.{doc_type}"):
            collection = await self._client[index].create_collection(doc_type, validator=validator)
            ttl_indexes = [
                await collection.create_index(field, expireAfterSeconds=0) for field in ttl_fields
            ]
        return {
            "acknowledged": True,
            "index": index,
            "type": doc_type,
            "validator": validator,
            "ttl_indexes": ttl_indexes,
        }

    async def start(self) -> None:
        """Validate connectivity by pinging the server."""
        with _translate_errors("ping", "admin"):
            await self._client.admin.command("ping")

    async def stop(self) -> None:
        """Close the underlying Motor client."""
        self._client.close()
        _logger.debug("Closed MongoDB client")
