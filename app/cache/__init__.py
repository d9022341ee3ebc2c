from .response_cache import (
    cache_key,
    ResponseCache,
    InMemoryResponseCache,
    RedisResponseCache,
    create_response_cache,
)

__all__ = [
    "cache_key",
    "ResponseCache",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "create_response_cache",
]
