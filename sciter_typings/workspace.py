"""
Workspace Operations
====================

The two user-facing operations built on the sync engine:

- initialize_scope: first-time setup of one workspace folder
- update_all_scopes: full reset and re-download for every known folder

Both also make sure a jsconfig.json exists so the editor picks up the
declaration files.
"""

import asyncio
import json
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from sciter_typings.environment import TypingsSettings, get_settings
from sciter_typings.errors import SciterTypingsError
from sciter_typings.sync import (
    BundledTypings,
    DestinationWriter,
    FreshnessStore,
    JsonStateStore,
    KeyValueStore,
    LocalFileSystem,
    RemoteFetcher,
    Scope,
    SyncResult,
    TypingsSynchronizer,
)
from sciter_typings.typings import MODULES_DIR_NAME
from sciter_typings.utils.paths import PathManager, get_path_manager

ScopePicker = Callable[[Sequence[Scope]], Scope | None]


class NoDestinationSelected(SciterTypingsError):
    """No workspace folder was available or chosen."""

    def __init__(self, message: str = "No workspace folder selected."):
        super().__init__(message)


class NoWritableFiles(SciterTypingsError):
    """Initialization wrote none of the tracked files."""

    def __init__(self, scope: Scope):
        self.scope = scope
        super().__init__("No typings files could be written.")


class UpdateReport(BaseModel):
    """Outcome of update_all_scopes."""

    results: list[SyncResult] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def empty_scopes(self) -> list[str]:
        return [result.scope.name for result in self.results if not result.written]


def jsconfig_template() -> dict:
    """Minimal jsconfig that points the JS language service at the typings."""
    return {
        "compilerOptions": {
            "checkJs": True,
            "target": "ES2020",
            "module": "ESNext",
            "allowJs": True,
            "moduleResolution": "Bundler",
            "lib": ["ES2020", "DOM"],
            "types": [],
        },
        "include": ["**/*.js", f"{MODULES_DIR_NAME}/**/*.d.ts"],
        "exclude": ["node_modules", "dist", "out"],
    }


def ensure_jsconfig(
    scope: Scope, fs: LocalFileSystem | None = None, path_manager: PathManager | None = None
) -> bool:
    """Create jsconfig.json under the scope root unless one already exists.

    Returns:
        bool: True if the file was created
    """
    fs = fs or LocalFileSystem()
    jsconfig_path = (path_manager or get_path_manager()).jsconfig_file(scope.root)
    if fs.exists(jsconfig_path):
        logger.debug(f"Keeping existing {jsconfig_path}")
        return False

    fs.write_file(jsconfig_path, json.dumps(jsconfig_template(), indent=2))
    logger.debug(f"Created {jsconfig_path}")
    return True


def select_scope(candidates: Sequence[Scope], picker: ScopePicker | None = None) -> Scope:
    """Choose the scope to initialize.

    One candidate is picked automatically; several go through the picker.

    Raises:
        NoDestinationSelected: If there are no candidates or nothing was picked
    """
    if len(candidates) == 1:
        return candidates[0]
    if not candidates or picker is None:
        raise NoDestinationSelected()

    picked = picker(candidates)
    if picked is None:
        raise NoDestinationSelected()
    return picked


def build_synchronizer(
    settings: TypingsSettings | None = None,
    path_manager: PathManager | None = None,
    store: KeyValueStore | None = None,
    fetcher: RemoteFetcher | None = None,
) -> TypingsSynchronizer:
    """Wire the sync engine from settings; any piece can be swapped out."""
    settings = settings or get_settings()
    path_manager = path_manager or get_path_manager()
    return TypingsSynchronizer(
        fetcher=fetcher or RemoteFetcher(base_url=settings.base_url, timeout=settings.timeout),
        freshness=FreshnessStore(store if store is not None else JsonStateStore(path_manager.get_state_file())),
        fallback=BundledTypings(path_manager.get_bundled_dir()),
        writer=DestinationWriter(LocalFileSystem(), path_manager),
    )


async def initialize_scope(
    synchronizer: TypingsSynchronizer,
    candidates: Sequence[Scope],
    picker: ScopePicker | None = None,
) -> SyncResult:
    """Download the typings into one folder and scaffold jsconfig.json.

    Raises:
        NoDestinationSelected: If no folder was chosen
        NoWritableFiles: If none of the tracked files could be written
    """
    scope = select_scope(candidates, picker)
    result = await synchronizer.sync_scope(scope, use_token=False)

    if not result.written:
        raise NoWritableFiles(scope)

    writer = synchronizer.writer
    await asyncio.to_thread(ensure_jsconfig, scope, writer.fs, writer.path_manager)
    logger.info(f'Initialized typings in "{MODULES_DIR_NAME}" for "{scope.name}"')
    return result


async def update_all_scopes(synchronizer: TypingsSynchronizer, scopes: Sequence[Scope]) -> UpdateReport:
    """Reset and re-download the typings for every scope.

    A failing scope is logged and skipped; the rest still update.
    """
    report = UpdateReport()
    for scope in scopes:
        try:
            result = await synchronizer.reset_and_sync(scope)
            report.results.append(result)
            if not result.written:
                logger.warning(f'No typings written during update for "{scope.name}".')
            writer = synchronizer.writer
            await asyncio.to_thread(ensure_jsconfig, scope, writer.fs, writer.path_manager)
        except (OSError, SciterTypingsError) as error:
            logger.error(f'Failed to update typings in "{scope.name}": {error}')
            report.failed[scope.name] = str(error)
    return report


def scopes_from_paths(paths: Sequence[Path]) -> list[Scope]:
    """Build scopes from folder paths, dropping duplicates and non-directories."""
    scopes: list[Scope] = []
    seen: set[str] = set()
    for path in paths:
        scope = Scope(root=path)
        if not scope.root.is_dir():
            logger.warning(f"Skipping {scope.root}: not a directory")
            continue
        if scope.identity in seen:
            continue
        seen.add(scope.identity)
        scopes.append(scope)
    return scopes
