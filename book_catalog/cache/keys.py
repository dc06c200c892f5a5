"""
Cache key families and the invalidation plan.

Two key families exist and their rendered strings are fixed, since
external consumers may read them directly:

    "books"              the cached full listing (aggregate key)
    "bookDetails:<id>"   the cached detail of one book (detail key)

Every mutation retires the aggregate key and the whole detail family,
whichever record it touched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

AGGREGATE_KEY = "books"
DETAIL_PREFIX = "bookDetails:"


@dataclass(frozen=True)
class AggregateKey:
    """Key of the cached listing."""

    def render(self) -> str:
        return AGGREGATE_KEY


@dataclass(frozen=True)
class DetailKey:
    """Key of the cached detail of a single book."""
    book_id: int

    def render(self) -> str:
        return f"{DETAIL_PREFIX}{self.book_id}"


CacheKey = Union[AggregateKey, DetailKey]


class MutationKind(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Mutation:
    """A successful durable change to one record."""
    kind: MutationKind
    book_id: int


@dataclass(frozen=True)
class InvalidationPlan:
    """
    Cache entries to retire after a mutation.

    Attributes:
        keys: Exact keys to delete, in order
        prefixes: Key families to enumerate and delete entirely, after ``keys``
    """
    keys: Tuple[CacheKey, ...]
    prefixes: Tuple[str, ...]


def invalidation_plan(mutation: Mutation) -> InvalidationPlan:
    """
    Return the cache entries a mutation makes stale.

    The whole detail family is retired, not only
    ``DetailKey(mutation.book_id)``.
    """
    return InvalidationPlan(keys=(AggregateKey(),), prefixes=(DETAIL_PREFIX,))
