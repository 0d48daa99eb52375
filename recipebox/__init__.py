"""recipebox - build recipe resolution for a Rust workspace."""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("recipebox")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
