"""FlyCache Cache: Cache provider API over swappable storage drivers."""

from flycache.cache.adapters.memory import InMemoryCacheDriver
from flycache.cache.adapters.search_index import SearchIndexCacheDriver
from flycache.cache.factory import create_cache_provider
from flycache.cache.ports.outbound import CacheDriver, SearchIndexClient
from flycache.cache.provider import CacheProvider
from flycache.cache.serialization import JsonSerializer, PickleSerializer, Serializer
from flycache.cache.types import CacheEntry, CacheStats, StorageLocation

__all__ = [
    "CacheDriver",
    "CacheEntry",
    "CacheProvider",
    "CacheStats",
    "InMemoryCacheDriver",
    "JsonSerializer",
    "PickleSerializer",
    "SearchIndexCacheDriver",
    "SearchIndexClient",
    "Serializer",
    "StorageLocation",
    "create_cache_provider",
]
