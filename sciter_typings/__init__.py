"""
sciter-typings - keeps Sciter declaration files in sync with upstream
"""

__version__ = "0.1.0"

from sciter_typings.sync import Scope, SyncResult, TypingsSynchronizer
from sciter_typings.workspace import (
    NoDestinationSelected,
    NoWritableFiles,
    build_synchronizer,
    initialize_scope,
    update_all_scopes,
)

__all__ = [
    "NoDestinationSelected",
    "NoWritableFiles",
    "Scope",
    "SyncResult",
    "TypingsSynchronizer",
    "build_synchronizer",
    "initialize_scope",
    "update_all_scopes",
]
