"""Adapters - I/O implementations of ports."""

from .console import ConsolePresenter
from .file_store import FileStateStore, MemoryStateStore
from .http_source import HttpEventSource

__all__ = [
    "ConsolePresenter",
    "FileStateStore",
    "MemoryStateStore",
    "HttpEventSource",
]
