"""Metadata for the project."""

from importlib.metadata import PackageNotFoundError, metadata, version

__all__ = ("__project__", "__version__")

try:
    __version__ = version("stmtspec")
    __project__ = metadata("stmtspec")["Name"]
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
    __project__ = "stmtspec"
finally:
    del version, PackageNotFoundError, metadata
