"""Durable record storage for Book Catalog."""

from .store import JsonFileRecordStore, RecordStore

__all__ = ["JsonFileRecordStore", "RecordStore"]
