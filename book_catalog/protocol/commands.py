"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands and responses.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from pydantic import BaseModel

from ..errors import StatusCode


class CommandType(Enum):
    """Enumeration of supported command types."""
    GET_BOOK = auto()
    LIST_BOOKS = auto()
    CREATE_BOOK = auto()
    UPDATE_BOOK = auto()
    DELETE_BOOK = auto()
    QUIT = auto()
    UNKNOWN = auto()


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command
        book_id: Target id for GET_BOOK, UPDATE_BOOK and DELETE_BOOK
        payload: Validated BookDraft (CREATE_BOOK) or BookPatch (UPDATE_BOOK)
        error: Why the request was rejected (UNKNOWN commands only)
        raw: The original raw command string
    """
    type: CommandType
    book_id: Optional[int] = None
    payload: Optional[BaseModel] = None
    error: str = ""
    raw: str = ""

    @property
    def is_valid(self) -> bool:
        """Check if the command is valid for its type."""
        if self.type == CommandType.UNKNOWN:
            return False
        if self.type in (CommandType.QUIT, CommandType.LIST_BOOKS):
            return True
        if self.type in (CommandType.GET_BOOK, CommandType.DELETE_BOOK):
            return self.book_id is not None
        if self.type == CommandType.CREATE_BOOK:
            return self.payload is not None
        if self.type == CommandType.UPDATE_BOOK:
            return self.book_id is not None and self.payload is not None
        return False


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK or one of the error status codes
        message: Error detail (errors only)
        body: JSON-serializable result (OK only)
    """
    status: StatusCode
    message: str = ""
    body: Any = None

    @property
    def is_ok(self) -> bool:
        return self.status == StatusCode.OK

    @classmethod
    def ok(cls, body: Any = None) -> "Response":
        """Create a successful response."""
        return cls(status=StatusCode.OK, body=body)

    @classmethod
    def error(cls, status: StatusCode, message: str) -> "Response":
        """Create an error response."""
        return cls(status=status, message=message)

    @classmethod
    def invalid(cls, message: str = "invalid command") -> "Response":
        """Create an INVALID_ARGUMENT response for a malformed request."""
        return cls.error(StatusCode.INVALID_ARGUMENT, message)

    @classmethod
    def internal(cls, message: str = "internal error") -> "Response":
        """Create an INTERNAL response."""
        return cls.error(StatusCode.INTERNAL, message)
