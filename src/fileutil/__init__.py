"""fileutil: file write/copy helpers, glob hydration, common path computation and a stack-based
archive (tar.gz/zip) builder that folds child archives into their parents."""

__version__ = '0.1.0'

# Core classes
from .core.fileutil import FileUtil
from .core.options import FileUtilOptions
from .core.archive_stack import ArchiveSession, ArchiveStack, ChildArchive, SessionState

# Path and glob helpers
from .core.paths import common_mapped_path, common_path, resolve_path
from .util.glob_helper import HydratedGlob, hydrate_glob, is_glob

# Exceptions
from .exceptions import (
    FileUtilError,
    InvalidArgumentError,
    IOFailureError,
    UnsupportedFormatError,
    UsageError,
)

# Event bus integration
from .plugin import on_plugin_load

__all__ = [
    # Version
    "__version__",
    # Core classes
    "FileUtil",
    "FileUtilOptions",
    "ArchiveSession",
    "ArchiveStack",
    "ChildArchive",
    "SessionState",
    # Path and glob helpers
    "common_mapped_path",
    "common_path",
    "resolve_path",
    "HydratedGlob",
    "hydrate_glob",
    "is_glob",
    # Exceptions
    "FileUtilError",
    "InvalidArgumentError",
    "IOFailureError",
    "UnsupportedFormatError",
    "UsageError",
    # Event bus integration
    "on_plugin_load",
]
