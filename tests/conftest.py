"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
from contextlib import closing
from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio

from book_catalog.cache.store import KVCache
from book_catalog.catalog import BookCatalog
from book_catalog.errors import CacheError
from book_catalog.models import Book, dump_books
from book_catalog.network.tcp_server import CatalogServer
from book_catalog.protocol.parser import ProtocolParser
from book_catalog.records.store import JsonFileRecordStore


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Collaborator fakes
# ============================================================================

class StubRecordStore:
    """
    In-memory RecordStore that records every save.

    Set ``load_error`` or ``save_error`` to an exception instance to make
    the corresponding operation raise it.
    """

    def __init__(self, books: List[Book]):
        self.books = list(books)
        self.load_error: Optional[Exception] = None
        self.save_error: Optional[Exception] = None
        self.load_calls = 0
        self.saves: List[List[Book]] = []

    def load_all(self) -> List[Book]:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error
        return list(self.books)

    def save_all(self, books: List[Book]) -> None:
        self.saves.append(list(books))
        if self.save_error is not None:
            raise self.save_error
        self.books = list(books)


class SpyCache:
    """
    CacheLayer wrapping a KVCache and recording every call in order.

    Operations named in ``failing`` raise CacheError instead of running.
    """

    def __init__(self, backend: KVCache = None):
        self.backend = backend if backend is not None else KVCache(max_size=100)
        self.calls: List[tuple] = []
        self.failing: set = set()

    def _record(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if op in self.failing:
            raise CacheError(f"{op} unavailable")

    def get(self, key):
        self._record("get", key)
        return self.backend.get(key)

    def set(self, key, value):
        self._record("set", key)
        self.backend.set(key, value)

    def delete(self, key):
        self._record("delete", key)
        return self.backend.delete(key)

    def keys_with_prefix(self, prefix):
        self._record("keys_with_prefix", prefix)
        return self.backend.keys_with_prefix(prefix)

    def calls_to(self, op: str) -> List[str]:
        return [key for name, key in self.calls if name == op]

    @property
    def mutations(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ("set", "delete")]


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_books() -> List[Book]:
    """Two records, matching the canonical delete scenario."""
    return [
        Book(id=1, title="Book 1", author="Author 1", publication_year=2021),
        Book(id=2, title="Book 2", author="Author 2", publication_year=2022),
    ]


@pytest.fixture
def books_path(tmp_path, sample_books):
    """A JSON record file seeded with the sample books."""
    path = tmp_path / "books.json"
    path.write_text(dump_books(sample_books, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def record_store(books_path) -> JsonFileRecordStore:
    return JsonFileRecordStore(books_path)


@pytest.fixture
def stub_store(sample_books) -> StubRecordStore:
    return StubRecordStore(sample_books)


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def cache() -> KVCache:
    """Create a fresh KVCache instance (100 keys)."""
    return KVCache(max_size=100)


@pytest.fixture
def small_cache() -> KVCache:
    """Create a KVCache with small capacity for eviction testing (5 keys)."""
    return KVCache(max_size=5)


@pytest.fixture
def spy_cache() -> SpyCache:
    return SpyCache()


# ============================================================================
# Catalog Fixtures
# ============================================================================

@pytest.fixture
def catalog(stub_store, spy_cache) -> BookCatalog:
    """Catalog over the stub store and spy cache."""
    return BookCatalog(stub_store, spy_cache)


@pytest.fixture
def file_catalog(record_store, cache) -> BookCatalog:
    """Catalog over a real JSON file and in-memory cache."""
    return BookCatalog(record_store, cache)


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int, file_catalog: BookCatalog) -> AsyncGenerator[CatalogServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a CatalogServer over a temporary JSON file on a free port
    2. Starts it in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    srv = CatalogServer(host='127.0.0.1', port=server_port, catalog=file_catalog)

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Usage:
        async with AsyncClient('127.0.0.1', 7272) as client:
            response = await client.send_command("GET_BOOK 1")
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Returns:
            Response string (stripped of trailing newline)
        """
        if not command.endswith('\n'):
            command += '\n'

        self.writer.write(command.encode())
        await self.writer.drain()

        response = await self.reader.readline()
        return response.decode().strip()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("LIST_BOOKS")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

