"""Tests for the typings synchronization loop."""

import pytest

from sciter_typings.sync import (
    BundledTypings,
    DestinationWriter,
    FreshnessStore,
    LocalFileSystem,
    MemoryStateStore,
    Scope,
    TypingsSynchronizer,
)
from sciter_typings.typings import MODULES_DIR_NAME, TYPINGS_FILES


@pytest.mark.asyncio
async def test_first_sync_writes_every_file(synchronizer, scope, freshness, fetcher):
    """No prior tokens and a healthy remote: all 17 files written and tokenised."""
    result = await synchronizer.sync_scope(scope, use_token=True)

    assert len(TYPINGS_FILES) == 17
    assert result.written_count == 17
    for name in TYPINGS_FILES:
        path = scope.root / MODULES_DIR_NAME / name
        assert path in result.written
        assert path.read_text(encoding="utf-8") == f"// remote {name}\n"
        assert freshness.get(scope.identity, name) == fetcher.etags[name]


@pytest.mark.asyncio
async def test_files_processed_in_declaration_order(synchronizer, scope, fetcher):
    await synchronizer.sync_scope(scope)
    assert [name for name, _ in fetcher.calls] == list(TYPINGS_FILES)


@pytest.mark.asyncio
async def test_second_conditional_sync_writes_nothing(synchronizer, scope):
    await synchronizer.sync_scope(scope, use_token=True)
    second = await synchronizer.sync_scope(scope, use_token=True)

    assert second.written == []
    assert second.unchanged == list(TYPINGS_FILES)


@pytest.mark.asyncio
async def test_not_modified_leaves_file_and_token_alone(synchronizer, scope, freshness, fetcher):
    """Stored token abc123 answered with 304: no write, token kept."""
    target = TYPINGS_FILES[4]
    fetcher.etags[target] = "abc123"
    freshness.set(scope.identity, target, "abc123")
    existing = scope.root / MODULES_DIR_NAME / target
    existing.parent.mkdir(parents=True)
    existing.write_text("// local copy\n", encoding="utf-8")

    result = await synchronizer.sync_scope(scope, use_token=True)

    assert existing not in result.written
    assert existing.read_text(encoding="utf-8") == "// local copy\n"
    assert freshness.get(scope.identity, target) == "abc123"
    assert (target, "abc123") in fetcher.calls
    assert result.written_count == 16


@pytest.mark.asyncio
async def test_without_tokens_stored_etags_are_not_sent(synchronizer, scope, freshness, fetcher):
    for name in TYPINGS_FILES:
        freshness.set(scope.identity, name, fetcher.etags[name])

    result = await synchronizer.sync_scope(scope, use_token=False)

    assert all(etag is None for _, etag in fetcher.calls)
    assert result.written_count == 17


@pytest.mark.asyncio
async def test_failed_fetch_uses_bundled_copy(synchronizer, scope, freshness, fetcher, log_records):
    target = "Graphics.d.ts"
    fetcher.failing.add(target)

    result = await synchronizer.sync_scope(scope, use_token=True)

    path = scope.root / MODULES_DIR_NAME / target
    assert path in result.written
    assert result.recovered == [target]
    assert path.read_text(encoding="utf-8") == f"// bundled {target}\n"
    assert freshness.get(scope.identity, target) is None

    warnings = [record for record in log_records if record["level"].name == "WARNING"]
    assert len(warnings) == 1
    assert target in warnings[0]["message"]


@pytest.mark.asyncio
async def test_fallback_does_not_touch_existing_token(synchronizer, scope, freshness, fetcher):
    target = "Node.d.ts"
    freshness.set(scope.identity, target, '"old"')
    fetcher.failing.add(target)

    await synchronizer.sync_scope(scope, use_token=True)

    assert freshness.get(scope.identity, target) == '"old"'


@pytest.mark.asyncio
async def test_fetch_and_fallback_failure_skips_file(synchronizer, scope, fetcher, bundled_dir, log_records):
    target = "jsx.d.ts"
    fetcher.failing.add(target)
    (bundled_dir / target).unlink()

    result = await synchronizer.sync_scope(scope, use_token=True)

    assert result.skipped == [target]
    assert not (scope.root / MODULES_DIR_NAME / target).exists()
    assert result.written_count == 16
    # later files are still processed
    assert fetcher.calls[-1][0] == TYPINGS_FILES[-1]

    errors = [record["message"] for record in log_records if record["level"].name == "ERROR"]
    assert len(errors) == 1
    assert "503 Service Unavailable" in errors[0]
    assert "No bundled typings for jsx.d.ts" in errors[0]


@pytest.mark.asyncio
async def test_partial_failure_is_contained(synchronizer, scope, fetcher, bundled_dir):
    broken = TYPINGS_FILES[:5]
    for name in broken:
        fetcher.failing.add(name)
        (bundled_dir / name).unlink()

    result = await synchronizer.sync_scope(scope)

    assert result.written_count == len(TYPINGS_FILES) - len(broken)
    assert result.skipped == list(broken)


@pytest.mark.asyncio
async def test_total_failure_returns_empty_result(synchronizer, scope, fetcher, bundled_dir):
    for name in TYPINGS_FILES:
        fetcher.failing.add(name)
        (bundled_dir / name).unlink()

    result = await synchronizer.sync_scope(scope)

    assert result.written == []
    assert (scope.root / MODULES_DIR_NAME).is_dir()


@pytest.mark.asyncio
async def test_empty_body_is_not_written(synchronizer, scope, freshness, fetcher):
    target = "global.d.ts"
    fetcher.remote[target] = ""

    result = await synchronizer.sync_scope(scope)

    assert not (scope.root / MODULES_DIR_NAME / target).exists()
    assert freshness.get(scope.identity, target) is None
    assert result.written_count == 16


@pytest.mark.asyncio
async def test_missing_etag_header_stores_nothing(synchronizer, scope, freshness, fetcher):
    target = "Window.d.ts"
    fetcher.etags[target] = None

    result = await synchronizer.sync_scope(scope, use_token=True)

    assert scope.root / MODULES_DIR_NAME / target in result.written
    assert freshness.get(scope.identity, target) is None


@pytest.mark.asyncio
async def test_reset_and_sync_starts_from_scratch(synchronizer, scope, freshness, fetcher):
    await synchronizer.sync_scope(scope, use_token=True)
    stray = scope.root / MODULES_DIR_NAME / "stale.d.ts"
    stray.write_text("// stale\n", encoding="utf-8")
    for name in TYPINGS_FILES:
        freshness.set(scope.identity, name, '"before-reset"')
    fetcher.calls.clear()

    result = await synchronizer.reset_and_sync(scope)

    assert not stray.exists()
    assert sorted(p.name for p in (scope.root / MODULES_DIR_NAME).iterdir()) == sorted(TYPINGS_FILES)
    assert all(etag is None for _, etag in fetcher.calls)
    assert result.written_count == 17
    for name in TYPINGS_FILES:
        assert freshness.get(scope.identity, name) == fetcher.etags[name]


@pytest.mark.asyncio
async def test_reset_clears_tokens_even_when_refetch_fails(synchronizer, scope, freshness, fetcher):
    target = "Event.d.ts"
    freshness.set(scope.identity, target, '"before-reset"')
    fetcher.failing.add(target)

    await synchronizer.reset_and_sync(scope)

    assert freshness.get(scope.identity, target) is None


@pytest.mark.asyncio
async def test_reset_without_directory(synchronizer, scope, state):
    await synchronizer.reset_scope(scope)
    assert not (scope.root / MODULES_DIR_NAME).exists()
    assert state.data == {}


@pytest.mark.asyncio
async def test_scopes_keep_separate_tokens(synchronizer, tmp_path, freshness, fetcher):
    first = Scope(root=tmp_path / "one")
    second = Scope(root=tmp_path / "two")
    first.root.mkdir()
    second.root.mkdir()

    await synchronizer.sync_scope(first, use_token=True)
    await synchronizer.reset_scope(second)

    name = TYPINGS_FILES[0]
    assert freshness.get(first.identity, name) == fetcher.etags[name]
    assert freshness.get(second.identity, name) is None

    result = await synchronizer.sync_scope(second, use_token=True)
    assert result.written_count == 17


@pytest.mark.asyncio
async def test_describe_scope(synchronizer, scope, fetcher):
    fetcher.failing.add("document.d.ts")
    await synchronizer.sync_scope(scope, use_token=True)

    statuses = {entry.file_name: entry for entry in synchronizer.describe_scope(scope)}

    assert list(statuses) == list(TYPINGS_FILES)
    assert statuses["document.d.ts"].on_disk
    assert statuses["document.d.ts"].etag is None
    assert statuses["Element.d.ts"].etag == fetcher.etags["Element.d.ts"]


class ReadOnlyStore(MemoryStateStore):
    """Reads work, every write is refused."""

    def set(self, key: str, value: str) -> None:
        raise PermissionError(f"read-only state: {key}")


@pytest.mark.asyncio
async def test_token_store_failure_keeps_remote_content(scope, fetcher, bundled_dir, log_records):
    synchronizer = TypingsSynchronizer(
        fetcher=fetcher,
        freshness=FreshnessStore(ReadOnlyStore()),
        fallback=BundledTypings(bundled_dir),
        writer=DestinationWriter(LocalFileSystem()),
    )

    result = await synchronizer.sync_scope(scope, use_token=True)

    assert result.written_count == 17
    assert len(set(result.written)) == 17
    assert result.recovered == []
    assert result.skipped == []
    for name in TYPINGS_FILES:
        assert (scope.root / MODULES_DIR_NAME / name).read_text(encoding="utf-8") == f"// remote {name}\n"

    warnings = [record["message"] for record in log_records if record["level"].name == "WARNING"]
    assert len(warnings) == 17
    assert all("Could not store ETag" in message for message in warnings)
