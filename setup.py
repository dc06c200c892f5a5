#!/usr/bin/env python3
"""
Book Catalog Setup Script
=========================
Allows installation of the book-catalog package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="book-catalog",
    version="1.0.0",
    packages=find_packages(include=["book_catalog", "book_catalog.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "redis>=4.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "book-catalog=book_catalog.server:main",
            "book-catalog-client=book_catalog.client:main",
        ],
    },
)
