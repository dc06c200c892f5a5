"""
Cache layer interface.

The cache is a best-effort accelerator and never authoritative. Every
operation is atomic per key only; there is no cross-key atomicity.
Backends raise ``CacheError`` when an operation cannot be completed.
"""

from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheLayer(Protocol):
    """Key-value operations used by the catalog."""

    def get(self, key: str) -> Optional[str]:
        """Return the cached value, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store or overwrite a value."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        ...

    def keys_with_prefix(self, prefix: str) -> List[str]:
        """Return every key starting with ``prefix``."""
        ...
