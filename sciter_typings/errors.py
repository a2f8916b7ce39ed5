"""Exception hierarchy shared across the package."""


class SciterTypingsError(Exception):
    """Base exception for sciter-typings errors."""

    pass
