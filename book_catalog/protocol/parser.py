"""
Protocol Parser Module

This module handles parsing of raw protocol commands and formatting of responses.
"""

import json

from pydantic import BaseModel, ValidationError

from .commands import Command, CommandType, Response
from ..config.settings import settings
from ..models import BookDraft, BookPatch


class ProtocolParser:
    """
    Parser for the Book Catalog text protocol.

    Protocol Format:
        Request:  <COMMAND> [ARGS...]\n
        Response: OK <json>\n | ERROR <STATUS> <detail>\n

    Commands:
        GET_BOOK <id>                 -> OK <book>
        LIST_BOOKS                    -> OK {"total": n, "items": [...]}
        CREATE_BOOK <json>            -> OK <book>
        UPDATE_BOOK <id> <json>       -> OK <book>
        DELETE_BOOK <id>              -> OK {"message": "Book deleted successfully"}
        QUIT                          -> (connection closed)

    Constraints:
        - Ids: positive integers
        - JSON payloads: a single object on the rest of the line
        - Request line: at most settings.MAX_REQUEST_LENGTH characters
    """

    def __init__(self):
        """Initialize the parser with constraints from settings."""
        self.max_request_length = settings.MAX_REQUEST_LENGTH

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request string into a Command object.

        Args:
            data: Raw request string (may include trailing newline)

        Returns:
            Command object representing the parsed request.
            Returns Command with type=UNKNOWN and an ``error`` detail for
            invalid/malformed requests.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("GET_BOOK 7")
            >>> cmd.type == CommandType.GET_BOOK
            True
            >>> cmd.book_id
            7
        """
        raw = data.strip()
        if not raw:
            return _unknown(raw, "empty request")
        if len(raw) > self.max_request_length:
            return _unknown(raw[:64], "request too long")

        parts = raw.split(maxsplit=1)
        command_name = parts[0].upper()
        rest = parts[1] if len(parts) > 1 else ""

        if command_name == "GET_BOOK":
            return self._parse_id_only(CommandType.GET_BOOK, rest, raw)
        if command_name == "DELETE_BOOK":
            return self._parse_id_only(CommandType.DELETE_BOOK, rest, raw)
        if command_name == "LIST_BOOKS":
            if rest:
                return _unknown(raw, "LIST_BOOKS takes no arguments")
            return Command(type=CommandType.LIST_BOOKS, raw=raw)
        if command_name == "CREATE_BOOK":
            return self._parse_create(rest, raw)
        if command_name == "UPDATE_BOOK":
            return self._parse_update(rest, raw)
        if command_name == "QUIT":
            if rest:
                return _unknown(raw, "QUIT takes no arguments")
            return Command(type=CommandType.QUIT, raw=raw)

        return _unknown(raw, "unknown command")

    def _parse_id_only(self, command_type: CommandType, rest: str, raw: str) -> Command:
        """
        Parse a command taking a single id.

        Format: <COMMAND> <id>
        """
        args = rest.split()
        if len(args) != 1:
            return _unknown(raw, f"{command_type.name} expects exactly one id")

        book_id = _parse_id(args[0])
        if book_id is None:
            return _unknown(raw, "id must be a positive integer")

        return Command(type=command_type, book_id=book_id, raw=raw)

    def _parse_create(self, rest: str, raw: str) -> Command:
        """
        Parse a CREATE_BOOK command.

        Format: CREATE_BOOK <json object>
        """
        if not rest:
            return _unknown(raw, "CREATE_BOOK expects a JSON object")

        payload, error = _parse_payload(BookDraft, rest)
        if payload is None:
            return _unknown(raw, error)

        return Command(type=CommandType.CREATE_BOOK, payload=payload, raw=raw)

    def _parse_update(self, rest: str, raw: str) -> Command:
        """
        Parse an UPDATE_BOOK command.

        Format: UPDATE_BOOK <id> <json object>
        """
        args = rest.split(maxsplit=1)
        if len(args) != 2:
            return _unknown(raw, "UPDATE_BOOK expects an id and a JSON object")

        book_id = _parse_id(args[0])
        if book_id is None:
            return _unknown(raw, "id must be a positive integer")

        payload, error = _parse_payload(BookPatch, args[1])
        if payload is None:
            return _unknown(raw, error)

        return Command(type=CommandType.UPDATE_BOOK, book_id=book_id, payload=payload, raw=raw)

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol string.

        Args:
            response: Response object to format

        Returns:
            Formatted response string WITH trailing newline.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.ok({"message": "done"}))
            'OK {"message":"done"}\\n'
            >>> parser.format_response(Response.invalid("unknown command"))
            'ERROR INVALID_ARGUMENT unknown command\\n'
        """
        if response.is_ok:
            if response.body is None:
                return "OK\n"
            return f"OK {_to_json(response.body)}\n"

        # Details must stay on one line
        message = " ".join(response.message.split())
        if message:
            return f"ERROR {response.status.value} {message}\n"
        return f"ERROR {response.status.value}\n"


def _unknown(raw: str, error: str) -> Command:
    return Command(type=CommandType.UNKNOWN, error=error, raw=raw)


def _parse_id(text: str):
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_payload(model, text: str):
    """Validate a JSON object against ``model``. Returns (payload, error)."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None, "payload is not valid JSON"
    if not isinstance(data, dict):
        return None, "payload must be a JSON object"

    try:
        return model.model_validate(data), ""
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) or "payload" for err in exc.errors()
        )
        return None, f"invalid fields: {fields}"


def _to_json(body) -> str:
    if isinstance(body, BaseModel):
        return body.model_dump_json()
    return json.dumps(body, separators=(",", ":"))
