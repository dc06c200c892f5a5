"""
Book Catalog: cached record service

A small book metadata service served over a line-oriented TCP protocol.
Records live in a JSON file (the system of record) and reads are
accelerated by a key-value cache that every mutation invalidates.
"""

__version__ = "1.0.0"
