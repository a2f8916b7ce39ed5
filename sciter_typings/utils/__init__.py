"""
Utility modules for sciter-typings.
"""

from sciter_typings.utils.paths import PathManager, get_path_manager

__all__ = ["PathManager", "get_path_manager"]
