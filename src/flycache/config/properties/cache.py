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
"""Cache subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from flycache.core.config import config_properties


@config_properties(prefix="flycache.cache")
@dataclass
class CacheProperties:
    """Configuration for the cache provider (flycache.cache.*)."""

    provider: str = "auto"
    namespace: str = ""
    serializer: str = "pickle"
    redis: dict = field(default_factory=lambda: {"url": "redis://localhost:6379/0"})


@config_properties(prefix="flycache.cache.document")
@dataclass
class DocumentStoreProperties:
    """Document-store driver settings (flycache.cache.document.*)."""

    uri: str = "mongodb://localhost:27017"
    server_selection_timeout_ms: int = 5000
    index: str = "doctrine"
    type: str = "cache"
    enforce_ttl: bool = True
