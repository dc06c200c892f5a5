"""
Book Catalog Module

BookCatalog mediates between the durable RecordStore and the CacheLayer.
Reads go cache-first and fill the cache on a miss; mutations load the
whole record sequence, persist the changed sequence, and only then
retire every cache entry the change could have made stale.

Failure handling:
    - Load failures raise InternalError carrying the store's message.
    - Save failures raise InternalError with a fixed per-operation message
      and leave the cache untouched.
    - Cache failures are logged and never fail the call.
"""

import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from .cache.keys import AggregateKey, DetailKey, Mutation, MutationKind, invalidation_plan
from .cache.layer import CacheLayer
from .errors import AlreadyExistsError, InternalError, NotFoundError
from .models import Book, BookDraft, BookList, BookPatch, dump_books, load_books
from .records.store import RecordStore

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Book not found"
ALREADY_EXISTS_DETAIL = "Book already exists"
DELETE_FAILED_DETAIL = "Failed to delete the book"
CREATE_FAILED_DETAIL = "Failed to create the book"
UPDATE_FAILED_DETAIL = "Failed to update the book"
DELETED_MESSAGE = "Book deleted successfully"


class BookCatalog:
    """
    Cache-coherent access to the book records.

    Both collaborators are injected so either can be replaced by an
    in-memory fake. Each call is a single linear attempt: nothing is
    retried and no lock is taken, so two processes mutating the same
    store can lose updates.

    Attributes:
        records: The durable RecordStore (source of truth)
        cache: The CacheLayer (best-effort accelerator)
    """

    def __init__(self, records: RecordStore, cache: CacheLayer):
        self.records = records
        self.cache = cache

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_details(self, book_id: int) -> Book:
        """
        Return the book with ``book_id``.

        Raises:
            InternalError: the record store could not be loaded
            NotFoundError: no record has this id
        """
        key = DetailKey(book_id).render()

        cached = self._cache_get(key)
        if cached is not None:
            try:
                return Book.model_validate_json(cached)
            except ValidationError:
                logger.warning(f"Discarding undecodable cache entry {key}")

        books = self._load()
        book = _find(books, book_id)
        if book is None:
            raise NotFoundError(NOT_FOUND_DETAIL)

        self._cache_set(key, book.model_dump_json())
        return book

    def list_all(self) -> BookList:
        """
        Return every book with the total count.

        Raises:
            InternalError: the record store could not be loaded
        """
        key = AggregateKey().render()

        cached = self._cache_get(key)
        if cached is not None:
            try:
                return BookList.of(load_books(cached))
            except ValidationError:
                logger.warning(f"Discarding undecodable cache entry {key}")

        books = self._load()
        self._cache_set(key, dump_books(books))
        return BookList.of(books)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def delete(self, book_id: int) -> Dict[str, str]:
        """
        Remove the book with ``book_id`` and retire its cache footprint.

        Raises:
            InternalError: loading failed, or persisting failed
                ("Failed to delete the book")
            NotFoundError: no record has this id; nothing is written
        """
        books = self._load()
        if _find(books, book_id) is None:
            raise NotFoundError(NOT_FOUND_DETAIL)

        remaining = [book for book in books if book.id != book_id]
        self._save(remaining, DELETE_FAILED_DETAIL)

        self._invalidate(Mutation(MutationKind.DELETE, book_id))
        logger.info(f"Deleted book {book_id}")
        return {"message": DELETED_MESSAGE}

    def create(self, draft: BookDraft) -> Book:
        """
        Append a new book and return it.

        The id comes from ``draft.id`` when given, otherwise one past the
        highest existing id.

        Raises:
            InternalError: loading failed, or persisting failed
                ("Failed to create the book")
            AlreadyExistsError: ``draft.id`` is already taken
        """
        books = self._load()

        if draft.id is not None:
            if _find(books, draft.id) is not None:
                raise AlreadyExistsError(ALREADY_EXISTS_DETAIL)
            book_id = draft.id
        else:
            book_id = max((book.id for book in books), default=0) + 1

        book = draft.to_book(book_id)
        self._save(books + [book], CREATE_FAILED_DETAIL)

        self._invalidate(Mutation(MutationKind.CREATE, book_id))
        logger.info(f"Created book {book_id}")
        return book

    def update(self, book_id: int, patch: BookPatch) -> Book:
        """
        Apply ``patch`` to the book with ``book_id`` in place.

        Raises:
            InternalError: loading failed, or persisting failed
                ("Failed to update the book")
            NotFoundError: no record has this id; nothing is written
        """
        books = self._load()

        for index, book in enumerate(books):
            if book.id == book_id:
                break
        else:
            raise NotFoundError(NOT_FOUND_DETAIL)

        try:
            updated = patch.apply(book)
        except ValidationError as exc:
            logger.error(f"Update of book {book_id} produced an invalid record: {exc}")
            raise InternalError(UPDATE_FAILED_DETAIL) from exc
        books = books[:index] + [updated] + books[index + 1:]
        self._save(books, UPDATE_FAILED_DETAIL)

        self._invalidate(Mutation(MutationKind.UPDATE, book_id))
        logger.info(f"Updated book {book_id}")
        return updated

    # ------------------------------------------------------------------
    # Record store access
    # ------------------------------------------------------------------

    def _load(self) -> List[Book]:
        try:
            return list(self.records.load_all())
        except OSError as exc:
            logger.error(f"Loading records failed: {exc}")
            raise InternalError(str(exc)) from exc

    def _save(self, books: List[Book], failure_detail: str) -> None:
        try:
            self.records.save_all(books)
        except OSError as exc:
            logger.error(f"Persisting records failed: {exc}")
            raise InternalError(failure_detail) from exc

    # ------------------------------------------------------------------
    # Cache access (best effort)
    # ------------------------------------------------------------------

    def _invalidate(self, mutation: Mutation) -> None:
        """Retire every cache entry made stale by ``mutation``."""
        plan = invalidation_plan(mutation)

        for key in plan.keys:
            self._cache_delete(key.render())

        for prefix in plan.prefixes:
            for key in self._cache_keys(prefix):
                self._cache_delete(key)

    def _cache_get(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except Exception as exc:
            logger.warning(f"Cache get {key} failed, treating as miss: {exc}")
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value)
        except Exception as exc:
            logger.warning(f"Cache set {key} failed: {exc}")

    def _cache_delete(self, key: str) -> None:
        try:
            self.cache.delete(key)
        except Exception as exc:
            logger.warning(f"Cache delete {key} failed, entry may be stale: {exc}")

    def _cache_keys(self, prefix: str) -> List[str]:
        try:
            return list(self.cache.keys_with_prefix(prefix))
        except Exception as exc:
            logger.warning(f"Cache key scan for {prefix}* failed, entries may be stale: {exc}")
            return []


def _find(books: List[Book], book_id: int) -> Optional[Book]:
    return next((book for book in books if book.id == book_id), None)
