"""Network module for Book Catalog."""

from .tcp_server import CatalogServer

__all__ = ["CatalogServer"]
