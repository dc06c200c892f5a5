"""
Pydantic models for book records.

``Book`` is the persisted record. ``BookDraft`` and ``BookPatch`` are the
inputs of the create and update operations, and ``BookList`` is the
listing response whose ``total`` is always derived from ``items``.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class Book(BaseModel):
    """A single catalog record. Identity is ``id``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    title: str
    author: str
    publication_year: Optional[int] = None


class BookDraft(BaseModel):
    """Input for creating a book. ``id`` is assigned when omitted."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(default=None, gt=0)
    title: str
    author: str
    publication_year: Optional[int] = None

    def to_book(self, book_id: int) -> Book:
        return Book(
            id=book_id,
            title=self.title,
            author=self.author,
            publication_year=self.publication_year,
        )


class BookPatch(BaseModel):
    """
    Partial update of a book. Only fields that were set are applied.

    ``title`` and ``author`` may be omitted but never set to null;
    ``publication_year`` may be cleared with an explicit null.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    author: Optional[str] = None
    publication_year: Optional[int] = None

    @field_validator("title", "author")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    def apply(self, book: Book) -> Book:
        """Return a revalidated copy of ``book`` with the set fields replaced."""
        return Book.model_validate({**book.model_dump(), **self.model_dump(exclude_unset=True)})


class BookList(BaseModel):
    """Listing response: every book plus a count."""

    total: int
    items: List[Book]

    @classmethod
    def of(cls, items: List[Book]) -> "BookList":
        return cls(total=len(items), items=list(items))


_book_list_adapter = TypeAdapter(List[Book])


def dump_books(books: List[Book], indent: Optional[int] = None) -> str:
    """Serialize a sequence of books as a JSON array."""
    return _book_list_adapter.dump_json(list(books), indent=indent).decode("utf-8")


def load_books(data) -> List[Book]:
    """Parse a JSON array of books. Raises ``pydantic.ValidationError``."""
    return _book_list_adapter.validate_json(data)
