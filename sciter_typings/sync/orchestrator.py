"""
Typings Synchronization
=======================

Drives the per-file decision loop for one destination scope: fetch with the
stored ETag, write what changed, fall back to the bundled snapshot when the
remote is unreachable, and keep going when a file cannot be recovered.
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from sciter_typings.sync.fallback import BundledTypings, FallbackUnavailable
from sciter_typings.sync.fetcher import FetchStatus, RemoteFetcher
from sciter_typings.sync.models import FileStatus, Scope, SyncResult
from sciter_typings.sync.state import FreshnessStore
from sciter_typings.sync.writer import DestinationWriter
from sciter_typings.typings import TYPINGS_FILES


class TypingsSynchronizer:
    """Keeps a scope's typings directory in step with the upstream files."""

    def __init__(
        self,
        fetcher: RemoteFetcher,
        freshness: FreshnessStore,
        fallback: BundledTypings,
        writer: DestinationWriter,
        files: Sequence[str] = TYPINGS_FILES,
    ):
        """Initialize the synchronizer.

        Args:
            fetcher: Conditional fetcher for the remote files
            freshness: ETag store keyed per scope and file
            fallback: Bundled snapshot used when a fetch fails
            writer: Writes files under the scope's typings directory
            files: Tracked file names, processed in this order
        """
        self.fetcher = fetcher
        self.freshness = freshness
        self.fallback = fallback
        self.writer = writer
        self.files = tuple(files)

    async def sync_scope(self, scope: Scope, use_token: bool = False) -> SyncResult:
        """Synchronize every tracked file into a scope.

        Args:
            scope: Destination scope
            use_token: Send stored ETags so unchanged files are skipped

        Returns:
            SyncResult: Written paths plus per-file outcomes. Per-file
            failures never raise out of this call.
        """
        dir_path = await asyncio.to_thread(self.writer.ensure_dir, scope.root)
        result = SyncResult(scope=scope)

        for file_name in self.files:
            await self._sync_file(scope, dir_path, file_name, use_token, result)

        logger.info(
            f"Synced {scope.name}: {len(result.written)} written, {len(result.unchanged)} unchanged, "
            f"{len(result.recovered)} from bundle, {len(result.skipped)} skipped"
        )
        return result

    async def _sync_file(
        self, scope: Scope, dir_path: Path, file_name: str, use_token: bool, result: SyncResult
    ) -> None:
        previous = await asyncio.to_thread(self.freshness.get, scope.identity, file_name) if use_token else None
        fetched = await self.fetcher.fetch(file_name, previous)

        if fetched.status is FetchStatus.UNCHANGED:
            logger.debug(f"{file_name} unchanged in {scope.name}")
            result.unchanged.append(file_name)
            return

        if fetched.status is FetchStatus.FAILED:
            await self._recover_file(scope, dir_path, file_name, fetched.cause, result)
            return

        if not fetched.content:
            logger.debug(f"{file_name} returned no content for {scope.name}, leaving it alone")
            return

        try:
            path = await asyncio.to_thread(self.writer.write, dir_path, file_name, fetched.content)
        except OSError as error:
            await self._recover_file(scope, dir_path, file_name, error, result)
            return
        result.written.append(path)

        if fetched.etag:
            try:
                await asyncio.to_thread(self.freshness.set, scope.identity, file_name, fetched.etag)
            except OSError as error:
                # content is on disk; the next conditional sync just refetches it
                logger.warning(f"Could not store ETag for {file_name} in {scope.name}: {error}")

    async def _recover_file(
        self, scope: Scope, dir_path: Path, file_name: str, cause: Exception | None, result: SyncResult
    ) -> None:
        try:
            content = await asyncio.to_thread(self.fallback.read, file_name)
            path = await asyncio.to_thread(self.writer.write, dir_path, file_name, content)
        except (FallbackUnavailable, OSError) as fallback_error:
            logger.error(
                f"Failed to update typings for {file_name} in {scope.name}. "
                f"Network error: {cause}, fallback error: {fallback_error}"
            )
            result.skipped.append(file_name)
            return

        logger.warning(f"Used bundled {file_name} for {scope.name}: {cause}")
        result.written.append(path)
        result.recovered.append(file_name)

    async def reset_scope(self, scope: Scope) -> None:
        """Delete the scope's typings directory and forget all of its ETags."""
        removed = await asyncio.to_thread(self.writer.fs.delete_recursive, self.writer.target_dir(scope.root))
        for file_name in self.files:
            await asyncio.to_thread(self.freshness.clear, scope.identity, file_name)
        logger.info(f"Reset typings for {scope.name}" + ("" if removed else " (nothing on disk)"))

    async def reset_and_sync(self, scope: Scope) -> SyncResult:
        """Full reset followed by an unconditional sync."""
        await self.reset_scope(scope)
        return await self.sync_scope(scope, use_token=False)

    def describe_scope(self, scope: Scope) -> list[FileStatus]:
        """Report stored ETag and on-disk presence for each tracked file."""
        dir_path = self.writer.target_dir(scope.root)
        return [
            FileStatus(
                file_name=file_name,
                etag=self.freshness.get(scope.identity, file_name),
                on_disk=self.writer.fs.exists(dir_path / file_name),
            )
            for file_name in self.files
        ]
