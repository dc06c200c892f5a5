"""Cache module for Book Catalog."""

from .keys import (
    AGGREGATE_KEY,
    DETAIL_PREFIX,
    AggregateKey,
    DetailKey,
    Mutation,
    MutationKind,
    invalidation_plan,
)
from .layer import CacheLayer
from .redis_cache import RedisCache
from .store import KVCache

__all__ = [
    "AGGREGATE_KEY",
    "DETAIL_PREFIX",
    "AggregateKey",
    "CacheLayer",
    "DetailKey",
    "KVCache",
    "Mutation",
    "MutationKind",
    "RedisCache",
    "invalidation_plan",
]
