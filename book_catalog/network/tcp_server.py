"""
Async TCP Server Module

This module implements the asynchronous TCP front end of the catalog.
It is a pure adapter: each request line is parsed into a Command,
executed against the BookCatalog, and the result or error is written
back as a single response line.
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..cache.store import KVCache
from ..catalog import BookCatalog
from ..config.settings import settings
from ..errors import CatalogError
from ..protocol.commands import Command, CommandType, Response
from ..protocol.parser import ProtocolParser
from ..records.store import JsonFileRecordStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class CatalogServer:
    """
    Asynchronous TCP server for the Book Catalog service.

    Each client connection is handled in its own coroutine. Catalog
    operations are synchronous and run to completion inside that
    coroutine, so requests served by one server never interleave their
    load and save steps.

    Features:
    - Non-blocking I/O with asyncio
    - Persistent connections (multiple commands per connection)
    - Errors mapped to status codes; no tracebacks sent to clients
    - Shared BookCatalog across all connections

    Usage:
        server = CatalogServer(host='0.0.0.0', port=7272)
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 7272)
        catalog: The BookCatalog shared by all connections
        parser: The ProtocolParser for parsing commands
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            catalog: BookCatalog = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            catalog: BookCatalog instance (built from settings if not provided)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        if catalog is None:
            catalog = BookCatalog(JsonFileRecordStore(settings.BOOKS_PATH), KVCache())
        self.catalog = catalog
        self.parser = ProtocolParser()

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0
        self._failed_requests = 0

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Reads request lines until the client disconnects or sends QUIT,
        answering each one with exactly one response line.

        Args:
            reader: StreamReader for reading from the client
            writer: StreamWriter for writing to the client
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        logger.debug(f"Client connected: {addr}")

        try:
            while True:
                data = await self._read_line(reader)
                if data is None:
                    await self._send(writer, Response.invalid("request too long"))
                    continue

                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                try:
                    raw = data.decode().rstrip('\r\n')
                except UnicodeDecodeError:
                    await self._send(writer, Response.invalid("invalid encoding"))
                    continue

                command = self.parser.parse_request(raw)

                if command.type == CommandType.QUIT:
                    logger.debug(f"Client requested quit: {addr}")
                    break

                if not command.is_valid:
                    response = Response.invalid(command.error or "invalid command")
                else:
                    self._total_requests += 1
                    response = self._execute_command(command)
                    if not response.is_ok:
                        self._failed_requests += 1

                await self._send(writer, response)

        except ConnectionResetError:
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            try:
                writer.close()
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def _read_line(self, reader: StreamReader) -> Optional[bytes]:
        """
        Read one request line.

        Returns the line (b"" once the client has disconnected), or None
        when the line exceeded the stream limit. An over-long line is
        consumed up to and including its newline so that its tail is
        never read as a request of its own.
        """
        try:
            return await reader.readuntil(b'\n')
        except asyncio.IncompleteReadError as exc:
            return exc.partial
        except asyncio.LimitOverrunError as exc:
            consumed = exc.consumed

        while True:
            try:
                await reader.readexactly(consumed)
                await reader.readuntil(b'\n')
                return None
            except asyncio.IncompleteReadError:
                return b''
            except asyncio.LimitOverrunError as exc:
                consumed = exc.consumed

    async def _send(self, writer: StreamWriter, response: Response) -> None:
        writer.write(self.parser.format_response(response).encode())
        await writer.drain()

    def _execute_command(self, command: Command) -> Response:
        """
        Execute a parsed command on the catalog.

        Catalog errors become error responses carrying their status and
        detail. Any other exception is logged and reported as INTERNAL
        without details.

        Args:
            command: The Command object to execute

        Returns:
            Response object with the result
        """
        try:
            if command.type == CommandType.GET_BOOK:
                return Response.ok(self.catalog.get_details(command.book_id))

            if command.type == CommandType.LIST_BOOKS:
                return Response.ok(self.catalog.list_all())

            if command.type == CommandType.DELETE_BOOK:
                return Response.ok(self.catalog.delete(command.book_id))

            if command.type == CommandType.CREATE_BOOK:
                return Response.ok(self.catalog.create(command.payload))

            if command.type == CommandType.UPDATE_BOOK:
                return Response.ok(self.catalog.update(command.book_id, command.payload))

        except CatalogError as exc:
            logger.debug(f"{command.type.name} failed: {exc.status.value} {exc.detail}")
            return Response.error(exc.status, exc.detail)
        except Exception as exc:
            logger.exception(f"Unexpected error executing {command.type.name}: {exc}")
            return Response.internal()

        return Response.invalid()

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs forever (or until cancelled). Call it from asyncio.run()
        or within an existing event loop.

        Example:
            server = CatalogServer(port=7272)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=settings.MAX_REQUEST_LENGTH,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Closes the server and waits for it to fully shut down.
        """
        if self._server is None:
            return

        self._server.close()
        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with connection and request counters.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "failed_requests": self._failed_requests,
        }

