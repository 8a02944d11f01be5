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
"""Build cache providers from configuration, with provider detection."""

from __future__ import annotations

import importlib

import structlog

from flycache.cache.adapters.memory import InMemoryCacheDriver
from flycache.cache.adapters.search_index import SearchIndexCacheDriver
from flycache.cache.ports.outbound import CacheDriver
from flycache.cache.provider import CacheProvider
from flycache.cache.serialization import Serializer, get_serializer
from flycache.config.properties.cache import CacheProperties, DocumentStoreProperties
from flycache.core.config import Config
from flycache.kernel.exceptions import ValidationException

logger = structlog.get_logger("flycache.cache.factory")

PROVIDERS = ("auto", "memory", "redis", "mongodb")


def is_available(module_name: str) -> bool:
    """Check if a Python package is importable."""
    try:
        importlib.import_module(module_name)
        return True
    except ImportError:
        return False


def detect_provider() -> str:
    """Detect the best available cache provider."""
    if is_available("motor.motor_asyncio"):
        return "mongodb"
    if is_available("redis.asyncio"):
        return "redis"
    return "memory"


def resolve_provider(configured: str) -> str:
    provider = configured.lower()
    if provider not in PROVIDERS:
        raise ValidationException(
            f"Unknown cache provider '{configured}'",
            code="CACHE_UNKNOWN_PROVIDER",
            context={"provider": configured, "supported": list(PROVIDERS)},
        )
    return detect_provider() if provider == "auto" else provider


def create_search_index_driver(config: Config, serializer: Serializer) -> SearchIndexCacheDriver:
    from flycache.cache.adapters.mongodb import MongoDocumentClient

    props = config.bind(DocumentStoreProperties)
    client = MongoDocumentClient.from_uri(props.uri, serverSelectionTimeoutMS=props.server_selection_timeout_ms)
    return SearchIndexCacheDriver(
        client,
        index=props.index,
        doc_type=props.type,
        serializer=serializer,
        enforce_ttl=props.enforce_ttl,
    )


def create_driver(config: Config) -> CacheDriver:
    """Instantiate the driver selected by ``flycache.cache.provider``."""
    props = config.bind(CacheProperties)
    provider = resolve_provider(props.provider)
    serializer = get_serializer(props.serializer)

    if provider == "mongodb":
        driver: CacheDriver = create_search_index_driver(config, serializer)
    elif provider == "redis":
        import redis.asyncio as aioredis

        from flycache.cache.adapters.redis import RedisCacheDriver

        url = str(props.redis.get("url", "redis://localhost:6379/0"))
        driver = RedisCacheDriver(aioredis.from_url(url), serializer=serializer)
    else:
        driver = InMemoryCacheDriver(serializer=serializer)

    logger.info("cache_driver_created", provider=provider, serializer=props.serializer)
    return driver


def create_cache_provider(config: Config | None = None) -> CacheProvider:
    """Build a :class:`CacheProvider` from *config* (packaged defaults when omitted)."""
    if config is None:
        config = Config.defaults()
    props = config.bind(CacheProperties)
    return CacheProvider(create_driver(config), namespace=props.namespace)
