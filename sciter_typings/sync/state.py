"""
Freshness State
===============

Durable per-(scope, file) ETag storage. The orchestrator talks to
FreshnessStore, which builds composite keys and delegates to any
KeyValueStore implementation.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger

from sciter_typings.typings import STATE_KEY_ETAG_PREFIX


class KeyValueStore(Protocol):
    """Minimal get/set/delete capability over string keys."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStateStore:
    """In-process store; forgets everything on exit."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonStateStore:
    """Key-value store persisted as a flat JSON object on disk."""

    def __init__(self, state_file: Path):
        """Initialize the store.

        Args:
            state_file: JSON file holding the entries; created on first write
        """
        self.state_file = Path(state_file)
        self.data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.state_file.exists():
            return {}
        try:
            loaded = json.loads(self.state_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            logger.warning(f"Ignoring unreadable state file {self.state_file}: {error}")
            return {}
        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring state file {self.state_file}: expected a JSON object")
            return {}
        return {str(key): str(value) for key, value in loaded.items()}

    def _save(self) -> None:
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(dir=str(self.state_file.parent))
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, sort_keys=True)
            Path(temp_path).replace(self.state_file)
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self._save()

    def delete(self, key: str) -> None:
        if key in self.data:
            del self.data[key]
            self._save()


class FreshnessStore:
    """ETag bookkeeping for (scope, file) pairs."""

    def __init__(self, store: KeyValueStore, prefix: str = STATE_KEY_ETAG_PREFIX):
        self.store = store
        self.prefix = prefix

    def key(self, scope_id: str, file_name: str) -> str:
        """Build the state key for a scope identity and file name."""
        return f"{self.prefix}{scope_id}:{file_name}"

    def get(self, scope_id: str, file_name: str) -> str | None:
        return self.store.get(self.key(scope_id, file_name))

    def set(self, scope_id: str, file_name: str, token: str) -> None:
        self.store.set(self.key(scope_id, file_name), token)

    def clear(self, scope_id: str, file_name: str) -> None:
        self.store.delete(self.key(scope_id, file_name))
