"""
docstore-cache — Store Backends

Exports available document store implementations.

Redis backend is lazy-loaded via factory.py to avoid import overhead.
"""

from .memory import MemoryDocumentStore

__all__ = [
    "MemoryDocumentStore",
]
