"""进程内缓存。"""

from src.core.infrastructure.cache.keys import CacheKeys
from src.core.infrastructure.cache.ttl_cache import CacheEntry, TTLCache

__all__ = [
    "CacheEntry",
    "CacheKeys",
    "TTLCache",
]
