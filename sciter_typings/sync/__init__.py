"""
Typings synchronization package: fetch, store ETags, fall back, write.
"""

from .fallback import BundledTypings, FallbackUnavailable
from .fetcher import FetchResult, FetchStatus, RemoteFetcher, TransientFetchError
from .models import FileStatus, Scope, SyncResult
from .orchestrator import TypingsSynchronizer
from .state import FreshnessStore, JsonStateStore, KeyValueStore, MemoryStateStore
from .writer import DestinationWriter, LocalFileSystem

__all__ = [
    "BundledTypings",
    "DestinationWriter",
    "FallbackUnavailable",
    "FetchResult",
    "FetchStatus",
    "FileStatus",
    "FreshnessStore",
    "JsonStateStore",
    "KeyValueStore",
    "LocalFileSystem",
    "MemoryStateStore",
    "RemoteFetcher",
    "Scope",
    "SyncResult",
    "TransientFetchError",
    "TypingsSynchronizer",
]
