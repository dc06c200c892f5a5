#!/usr/bin/env python3
"""
Book Catalog Client

A blocking TCP client for the Book Catalog server, plus an interactive
shell for manual testing.

Usage:
    book-catalog-client                   # Connect to localhost:7272
    book-catalog-client --host 1.2.3.4    # Connect to specific host
    book-catalog-client --port 8080       # Connect to specific port

Commands:
    GET_BOOK <id>              - Show one book
    LIST_BOOKS                 - List every book
    CREATE_BOOK <json>         - Add a book
    UPDATE_BOOK <id> <json>    - Change fields of a book
    DELETE_BOOK <id>           - Delete a book
    QUIT                       - Close connection
    help                       - Show this help
    exit                       - Exit client
"""

import argparse
import json
import socket
import sys
from typing import Any, Optional

from .errors import StatusCode


class CatalogRequestError(Exception):
    """The server answered with an ERROR line."""

    def __init__(self, status: StatusCode, detail: str):
        super().__init__(f"{status.value} {detail}".strip())
        self.status = status
        self.detail = detail


def parse_response(line: str) -> Any:
    """
    Decode one response line.

    Returns:
        The decoded JSON body of an OK response (None for a bare OK)

    Raises:
        CatalogRequestError: for ERROR responses
        ValueError: for lines that are not protocol responses
    """
    line = line.strip()
    if line == "OK":
        return None
    if line.startswith("OK "):
        return json.loads(line[3:])
    if line.startswith("ERROR"):
        parts = line.split(maxsplit=2)
        if len(parts) < 2:
            raise ValueError(f"malformed error response: {line!r}")
        detail = parts[2] if len(parts) > 2 else ""
        raise CatalogRequestError(StatusCode(parts[1]), detail)
    raise ValueError(f"unexpected response: {line!r}")


class CatalogClient:
    """Simple TCP client for the Book Catalog server."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket: Optional[socket.socket] = None
        self._buffer = b''

    def connect(self) -> None:
        """Connect to the server. Raises OSError on failure."""
        self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
        self._buffer = b''

    def disconnect(self) -> None:
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def send_command(self, command: str) -> str:
        """Send a raw command line and return the raw response line."""
        if not self.socket:
            raise ConnectionError("not connected")

        if not command.endswith('\n'):
            command += '\n'
        self.socket.sendall(command.encode('utf-8'))

        while b'\n' not in self._buffer:
            chunk = self.socket.recv(4096)
            if not chunk:
                raise ConnectionError("connection closed by server")
            self._buffer += chunk

        line, self._buffer = self._buffer.split(b'\n', 1)
        return line.decode('utf-8')

    def get_book(self, book_id: int) -> dict:
        return parse_response(self.send_command(f"GET_BOOK {book_id}"))

    def list_books(self) -> dict:
        return parse_response(self.send_command("LIST_BOOKS"))

    def create_book(self, **fields) -> dict:
        return parse_response(self.send_command(f"CREATE_BOOK {json.dumps(fields)}"))

    def update_book(self, book_id: int, **fields) -> dict:
        return parse_response(self.send_command(f"UPDATE_BOOK {book_id} {json.dumps(fields)}"))

    def delete_book(self, book_id: int) -> dict:
        return parse_response(self.send_command(f"DELETE_BOOK {book_id}"))

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def print_help():
    """Print help message."""
    print("""
Book Catalog Commands:
----------------------
  GET_BOOK <id>              Show one book
  LIST_BOOKS                 List every book with the total count
  CREATE_BOOK <json>         Add a book (id assigned when omitted)
  UPDATE_BOOK <id> <json>    Change title, author or publication_year
  DELETE_BOOK <id>           Delete a book
  QUIT                       Close connection and exit

Client Commands:
----------------
  help                       Show this help message
  exit                       Exit the client
  reconnect                  Reconnect to the server

Examples:
---------
  CREATE_BOOK {"title": "Dune", "author": "Frank Herbert", "publication_year": 1965}
  UPDATE_BOOK 4 {"publication_year": 1966}
  GET_BOOK 4
  DELETE_BOOK 4
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive client for the Book Catalog server"
    )
    parser.add_argument("--host", type=str, default="localhost", help="Server host (default: localhost)")
    parser.add_argument("--port", type=int, default=7272, help="Server port (default: 7272)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Socket timeout in seconds (default: 5.0)")
    args = parser.parse_args()

    print(f"Connecting to {args.host}:{args.port}...")
    client = CatalogClient(args.host, args.port, args.timeout)

    try:
        client.connect()
    except OSError as e:
        print(f"Connection error: {e}")
        print(f"  Try: book-catalog --port {args.port}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()
            except EOFError:
                print("\nGoodbye!")
                break

            if not command:
                continue

            lower_cmd = command.lower()

            if lower_cmd == "help":
                print_help()
                continue

            if lower_cmd in ("exit", "quit"):
                try:
                    client.send_command("QUIT")
                except OSError:
                    pass
                print("Goodbye!")
                break

            if lower_cmd == "reconnect":
                client.disconnect()
                try:
                    client.connect()
                    print("Reconnected!")
                except OSError as e:
                    print(f"Reconnection failed: {e}")
                continue

            try:
                print(client.send_command(command))
            except socket.timeout:
                print("ERROR: Request timed out")
            except OSError as e:
                print(f"ERROR: {e}")

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
