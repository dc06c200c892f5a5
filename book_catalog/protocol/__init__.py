"""Protocol module for Book Catalog."""

from .commands import Command, CommandType, Response
from .parser import ProtocolParser

__all__ = [
    "Command",
    "CommandType",
    "Response",
    "ProtocolParser",
]
