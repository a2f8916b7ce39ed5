from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from sciter_typings.environment import get_settings
from sciter_typings.typings import MODULES_DIR_NAME

PACKAGE_DIR = Path(__file__).resolve().parent.parent

JSCONFIG_FILE_NAME = "jsconfig.json"


class PathManager(BaseModel):
    """Resolves the locations sciter-typings reads from and writes to."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Read-only snapshot shipped inside the package
    bundled_dir: Path = Field(default_factory=lambda: PACKAGE_DIR / MODULES_DIR_NAME)
    state_file: Path = Field(default_factory=lambda: get_settings().state_file)

    def get_bundled_dir(self) -> Path:
        """Get the bundled typings directory."""
        return self.bundled_dir

    def get_state_file(self) -> Path:
        """Get the freshness state file path."""
        return self.state_file

    def modules_dir(self, scope_root: Path) -> Path:
        """Get the typings directory under a scope root."""
        return Path(scope_root) / MODULES_DIR_NAME

    def jsconfig_file(self, scope_root: Path) -> Path:
        """Get the jsconfig.json path under a scope root."""
        return Path(scope_root) / JSCONFIG_FILE_NAME


# Singleton instance
_path_manager = None


def get_path_manager() -> PathManager:
    """Get the singleton path manager instance."""
    global _path_manager
    if _path_manager is None:
        _path_manager = PathManager()
    return _path_manager
