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
"""Value types shared by the cache provider, its drivers and backend clients."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

# Accepted forms of an entry lifetime. 0 / None mean "never expires".
TTL = int | float | timedelta | None


def ttl_seconds(ttl: TTL) -> float | None:
    """Normalize *ttl* to positive seconds, or ``None`` for an infinite lifetime."""
    if ttl is None:
        return None
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds <= 0:
        return None
    return seconds


@dataclass(frozen=True)
class CacheEntry:
    """A logical key / value / lifetime triple."""

    key: str
    value: Any
    ttl: timedelta | None = None


@dataclass(frozen=True)
class StorageLocation:
    """Where a cache key lives inside a search index."""

    index: str
    doc_type: str
    doc_id: str

    @classmethod
    def for_key(cls, key: str, index: str, doc_type: str) -> StorageLocation:
        """Derive the location of *key*: lower-cased namespace, md5 hex document id."""
        return cls(
            index=str(index).lower(),
            doc_type=str(doc_type).lower(),
            doc_id=hashlib.md5(key.encode("utf-8", "surrogatepass")).hexdigest(),
        )


# --- fetch results ------------------------------------------------------------


@dataclass(frozen=True)
class Found:
    value: Any


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class BackendError:
    """The backend failed; *cause* is kept for logging only."""

    cause: BaseException


FetchResult = Found | NotFound | BackendError

NOT_FOUND = NotFound()


# --- typed backend responses --------------------------------------------------


@dataclass(frozen=True)
class GetResult:
    """Decoded get-by-id response."""

    found: bool
    source: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Acknowledgement:
    """Decoded write / delete response."""

    acknowledged: bool
    raw: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.acknowledged


@dataclass(frozen=True)
class CacheStats:
    """Backend statistics. Fields a backend cannot report stay ``None``."""

    hits: int | None = None
    misses: int | None = None
    uptime: float | None = None
    memory_usage: int | None = None
    memory_available: int | None = None
