"""Configuration module for Book Catalog."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
