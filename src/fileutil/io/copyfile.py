"""
Buffered copy utilities that compute a CRC32c checksum of the copied bytes in the same pass.

Archive entries are streamed through these helpers so that every session can keep a manifest of
what it wrote, and so that a child archive spliced into its parent can be verified.
"""

import crc32c as crc32c_lib

__all__ = [
    'copy_crc32c',
    'accumulate_crc32c',
    'crc32c_of_bytes',
]

# Default buffer size for user-space copies (64 KB)
_DEFAULT_BUFSIZE = 64 * 1024


def copy_crc32c(src, dst, size=None, bufsize=_DEFAULT_BUFSIZE, initial=0):
    """
    Copy bytes from ``src`` to ``dst`` and compute the CRC32c in a single pass.

    Copies until EOF if ``size`` is None, otherwise at most ``size`` bytes. Both file positions
    advance by the number of bytes copied.

    Returns:
        Tuple of (bytes_copied, crc32c)
    """
    crc = initial
    n_copied = 0
    while size is None or n_copied < size:
        chunk_size = bufsize if size is None else min(bufsize, size - n_copied)
        chunk = src.read(chunk_size)
        if not chunk:
            break
        dst.write(chunk)
        crc = crc32c_lib.crc32c(chunk, crc)
        n_copied += len(chunk)
    return n_copied, crc


def accumulate_crc32c(fileobj, size=None, bufsize=_DEFAULT_BUFSIZE, initial=0):
    """Compute the CRC32c of what is read from ``fileobj`` until EOF, or of at most ``size``
    bytes, starting at the current position."""
    crc = initial
    remaining = size
    while remaining is None or remaining > 0:
        chunk = fileobj.read(bufsize if remaining is None else min(bufsize, remaining))
        if not chunk:
            break
        crc = crc32c_lib.crc32c(chunk, crc)
        if remaining is not None:
            remaining -= len(chunk)
    return crc


def crc32c_of_bytes(data, initial=0):
    return crc32c_lib.crc32c(data, initial)


class ChecksumReader:
    """Read-only file wrapper that accumulates the CRC32c of everything read through it.

    Used to checksum files while an archive writer pulls their contents.
    """

    def __init__(self, fileobj, initial=0):
        self._fileobj = fileobj
        self.crc32c = initial

    def read(self, size=-1):
        data = self._fileobj.read(size)
        self.crc32c = crc32c_lib.crc32c(data, self.crc32c)
        return data

