"""Bundled last-known-good typings, used when the remote fetch fails."""

from pathlib import Path

from sciter_typings.errors import SciterTypingsError


class FallbackUnavailable(SciterTypingsError):
    """The bundled copy of a tracked file could not be read."""

    def __init__(self, file_name: str, detail: str):
        self.file_name = file_name
        self.detail = detail
        super().__init__(f"No bundled typings for {file_name}: {detail}")


class BundledTypings:
    """Read-only access to the snapshot shipped with the package."""

    def __init__(self, bundled_dir: Path):
        self.bundled_dir = Path(bundled_dir)

    def read(self, file_name: str) -> str:
        """Read the bundled copy of a file.

        Args:
            file_name: Tracked file name

        Returns:
            str: Decoded UTF-8 content

        Raises:
            FallbackUnavailable: If the file is missing or unreadable
        """
        path = self.bundled_dir / file_name
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            raise FallbackUnavailable(file_name, str(error)) from error
