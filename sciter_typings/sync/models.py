"""Data models shared by the sync engine and the workspace layer."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Scope(BaseModel):
    """A destination root that receives its own typings directory and ETags."""

    model_config = ConfigDict(frozen=True)

    root: Path
    name: str = ""

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("root") is not None:
            root = Path(data["root"]).expanduser().resolve()
            data = {**data, "root": root, "name": data.get("name") or root.name or str(root)}
        return data

    @property
    def identity(self) -> str:
        """Stable identity used to namespace freshness tokens."""
        return self.root.as_uri()


class SyncResult(BaseModel):
    """What happened while syncing one scope."""

    scope: Scope
    written: list[Path] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    recovered: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def written_count(self) -> int:
        return len(self.written)


class FileStatus(BaseModel):
    """Per-file view of a scope: stored ETag and presence on disk."""

    file_name: str
    etag: str | None = None
    on_disk: bool = False
