"""Cache drivers: concrete storage implementations.

Backend clients with third-party dependencies (``redis``, ``mongodb``) are
imported from their own modules so their libraries stay optional.
"""

from flycache.cache.adapters.memory import InMemoryCacheDriver
from flycache.cache.adapters.search_index import SearchIndexCacheDriver

__all__ = ["InMemoryCacheDriver", "SearchIndexCacheDriver"]
