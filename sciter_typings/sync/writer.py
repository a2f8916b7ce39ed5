"""
Destination Writer
==================

Filesystem access for a destination scope. LocalFileSystem is the only
place that touches the disk; DestinationWriter and the reset routine go
through it.
"""

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

from sciter_typings.utils.paths import PathManager, get_path_manager


class LocalFileSystem:
    """stat/create_dir/read_file/write_file/delete_recursive on the local disk."""

    def stat(self, path: Path) -> os.stat_result | None:
        """Stat a path, returning None when it does not exist."""
        try:
            return Path(path).stat()
        except FileNotFoundError:
            return None

    def exists(self, path: Path) -> bool:
        return self.stat(path) is not None

    def create_dir(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def read_file(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_file(self, path: Path, content: str) -> None:
        """Replace a file's content atomically via a temp file in the same directory."""
        path = Path(path)
        temp_fd, temp_path = tempfile.mkstemp(dir=str(path.parent))
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)

            # On Windows, we need to remove the target file first
            if os.name == "nt" and path.exists():
                path.unlink()

            Path(temp_path).replace(path)
        except Exception:
            with contextlib.suppress(OSError):
                Path(temp_path).unlink()
            raise

    def delete_recursive(self, path: Path) -> bool:
        """Delete a directory tree. Returns False if nothing was there."""
        path = Path(path)
        if not path.exists():
            return False
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        return True


class DestinationWriter:
    """Creates the typings directory under a scope root and writes files into it."""

    def __init__(self, fs: LocalFileSystem | None = None, path_manager: PathManager | None = None):
        self.fs = fs or LocalFileSystem()
        self.path_manager = path_manager or get_path_manager()

    def target_dir(self, scope_root: Path) -> Path:
        return self.path_manager.modules_dir(scope_root)

    def ensure_dir(self, scope_root: Path) -> Path:
        """Create the typings directory if needed and return it."""
        dir_path = self.target_dir(scope_root)
        self.fs.create_dir(dir_path)
        return dir_path

    def write(self, dir_path: Path, file_name: str, content: str) -> Path:
        """Overwrite one file in the typings directory and return its path."""
        file_path = Path(dir_path) / file_name
        self.fs.write_file(file_path, content)
        return file_path
