"""
Record store abstraction layer for plug-and-play database support.
Supports JSON (file-based) and Memory (in-memory) backends.
"""
from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from .json_adapter import JSONAdapter
from .factory import DatabaseFactory

__all__ = [
    "DatabaseInterface",
    "MemoryAdapter",
    "JSONAdapter",
    "DatabaseFactory"
]
