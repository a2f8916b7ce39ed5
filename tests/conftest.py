"""
Test Configuration and Fixtures
===============================

This module provides pytest fixtures and doubles for testing sciter-typings.
"""

from collections.abc import Generator
from pathlib import Path

import pytest
from loguru import logger

from sciter_typings.sync import (
    BundledTypings,
    DestinationWriter,
    FetchResult,
    FreshnessStore,
    LocalFileSystem,
    MemoryStateStore,
    Scope,
    TransientFetchError,
    TypingsSynchronizer,
)
from sciter_typings.typings import TYPINGS_FILES


class FakeFetcher:
    """Stands in for RemoteFetcher; answers from in-memory remote state."""

    def __init__(self):
        self.remote: dict[str, str] = {name: f"// remote {name}\n" for name in TYPINGS_FILES}
        self.etags: dict[str, str | None] = {name: f'"etag-{index}"' for index, name in enumerate(TYPINGS_FILES)}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    async def fetch(self, file_name: str, etag: str | None = None) -> FetchResult:
        self.calls.append((file_name, etag))
        if file_name in self.failing:
            return FetchResult.failed(
                TransientFetchError(f"https://example.test/{file_name}", "503 Service Unavailable")
            )
        current = self.etags.get(file_name)
        if etag is not None and etag == current:
            return FetchResult.unchanged(etag)
        return FetchResult.updated(self.remote[file_name], current)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def bundled_dir(tmp_path: Path) -> Path:
    """A bundled snapshot with distinguishable content for every tracked file."""
    directory = tmp_path / "bundle"
    directory.mkdir()
    for name in TYPINGS_FILES:
        (directory / name).write_text(f"// bundled {name}\n", encoding="utf-8")
    return directory


@pytest.fixture
def state() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def freshness(state: MemoryStateStore) -> FreshnessStore:
    return FreshnessStore(state)


@pytest.fixture
def synchronizer(fetcher: FakeFetcher, freshness: FreshnessStore, bundled_dir: Path) -> TypingsSynchronizer:
    return TypingsSynchronizer(
        fetcher=fetcher,
        freshness=freshness,
        fallback=BundledTypings(bundled_dir),
        writer=DestinationWriter(LocalFileSystem()),
    )


@pytest.fixture
def scope(tmp_path: Path) -> Scope:
    root = tmp_path / "workspace"
    root.mkdir()
    return Scope(root=root)


@pytest.fixture
def log_records() -> Generator[list[dict], None, None]:
    """Collect loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
