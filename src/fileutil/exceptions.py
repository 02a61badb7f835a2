"""Exceptions indicating various errors related to file utility and archive operations"""


class FileUtilError(Exception):
    """Base class for all exceptions in fileutil"""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidArgumentError(FileUtilError, TypeError):
    """Exception raised when an argument has the wrong type or shape.

    Inherits from TypeError so that callers catching TypeError keep working.
    """

    def __init__(self, message: str):
        super().__init__(message)


class UnsupportedFormatError(FileUtilError, ValueError):
    """Exception raised when an archive is requested in an unknown compression format

    Args:
        compress_format: the rejected format string
    """

    def __init__(self, compress_format: str):
        super().__init__(f"Unknown compression format: '{compress_format}'.")
        self.compress_format = compress_format


class IOFailureError(FileUtilError, OSError):
    """Exception raised when a filesystem or stream level operation fails while finalizing an
    archive.

    Analogous to OSError. The original error is available as ``__cause__``.

    Args:
        path: path of the archive whose stream failed
        reason: description of the underlying error
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f'I/O failure on {path}: {reason}')
        self.path = path


class UsageError(FileUtilError, RuntimeError):
    """Exception raised when an archive session is used after it was finalized"""

    def __init__(self, message: str):
        super().__init__(message)
