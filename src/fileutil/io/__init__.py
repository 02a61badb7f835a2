"""I/O utilities for fileutil."""

from .copyfile import copy_crc32c, accumulate_crc32c, crc32c_of_bytes, ChecksumReader

__all__ = ['copy_crc32c', 'accumulate_crc32c', 'crc32c_of_bytes', 'ChecksumReader']
