#!/usr/bin/env python3
"""
Book Catalog Server Entry Point

This is the main entry point for starting the Book Catalog server.

Usage:
    python -m book_catalog.server                          # Default settings (0.0.0.0:7272)
    python -m book_catalog.server --port 8080              # Custom port
    python -m book_catalog.server --books-path books.json  # Custom record file
    python -m book_catalog.server --cache-backend redis    # Shared Redis cache
    python -m book_catalog.server --debug                  # Enable debug logging

Environment Variables:
    BOOK_CATALOG_HOST            - Server bind address
    BOOK_CATALOG_PORT            - Server port
    BOOK_CATALOG_BOOKS_PATH      - JSON record file
    BOOK_CATALOG_CACHE_BACKEND   - memory or redis
    BOOK_CATALOG_CACHE_MAX_KEYS  - In-memory cache size
    BOOK_CATALOG_REDIS_URL       - Redis connection URL
    BOOK_CATALOG_DEBUG           - Enable debug mode (true/false)
"""

import argparse
import asyncio
import logging
import signal
import sys

from .cache.redis_cache import RedisCache
from .cache.store import KVCache
from .catalog import BookCatalog
from .config.settings import settings
from .network.tcp_server import CatalogServer
from .records.store import JsonFileRecordStore

CACHE_BACKENDS = ("memory", "redis")


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Book Catalog: cached book record server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--books-path",
        type=str,
        default=settings.BOOKS_PATH,
        help="JSON file holding the book records",
    )

    parser.add_argument(
        "--cache-backend",
        choices=CACHE_BACKENDS,
        default=settings.CACHE_BACKEND,
        help="Cache backend to use",
    )

    parser.add_argument(
        "--max-keys",
        type=int,
        default=settings.CACHE_MAX_KEYS,
        help="Maximum number of keys in the in-memory cache",
    )

    parser.add_argument(
        "--redis-url",
        type=str,
        default=settings.REDIS_URL,
        help="Redis URL for the redis cache backend",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )


def build_catalog(args: argparse.Namespace) -> BookCatalog:
    """Wire the record store and cache backend selected by ``args``."""
    records = JsonFileRecordStore(args.books_path)

    if args.cache_backend == "redis":
        cache = RedisCache(url=args.redis_url)
    else:
        cache = KVCache(max_size=args.max_keys)

    return BookCatalog(records, cache)


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    # Setup logging
    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    catalog = build_catalog(args)
    server = CatalogServer(host=args.host, port=args.port, catalog=catalog)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        await server.stop()

    # Register signal handlers (Unix only)
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: asyncio.create_task(shutdown(s))
            )

    # Log startup info
    logger.info("Starting Book Catalog server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Books: {args.books_path}")
    logger.info(f"  Cache: {args.cache_backend}")
    logger.info(f"  Debug: {args.debug}")

    # Run the server
    try:
        loop.run_until_complete(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
