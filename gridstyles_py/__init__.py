"""GridStyles – all public symbols are re-exported from .core."""

from importlib import metadata

from .core import (  # noqa: F401 – re-exports
    ItemFacts,
    ItemStatus,
    LayoutResult,
    StyleConfig,
    compute_layout,
    load,
)

try:
    __version__ = metadata.version("gridstyles-py")
except metadata.PackageNotFoundError:  # editable install before first build
    __version__ = "0.0.0"
