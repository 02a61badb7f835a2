"""Writers for the compressed container formats an archive session can produce.

Both writers wrap an already open binary file object and never close it themselves; the session
that owns the output stream closes it after the writer has been finalized.
"""

import io
import os
import os.path as osp
import tarfile
import time
import zipfile
from contextlib import AbstractContextManager

from ..exceptions import UnsupportedFormatError
from ..io.copyfile import ChecksumReader, copy_crc32c, crc32c_of_bytes

SUPPORTED_FORMATS = ('tar.gz', 'zip')

# Maximum compression, as for all archives produced by fileutil
COMPRESS_LEVEL = 9


def get_archive_writer(compress_format, fileobj):
    """Create the archive writer for ``compress_format`` writing into ``fileobj``.

    Raises:
        UnsupportedFormatError: If the format is not one of :data:`SUPPORTED_FORMATS`.
    """
    if compress_format == 'tar.gz':
        return TarWriter(fileobj)
    if compress_format == 'zip':
        return ZipWriter(fileobj)
    raise UnsupportedFormatError(compress_format)


class ArchiveWriter(AbstractContextManager):
    """Common interface of the archive writers.

    Every ``add_*`` method returns the CRC32c of the data stored for the entry (``None`` for
    directory entries).
    """

    def add_bytes(self, name, data):
        raise NotImplementedError

    def add_fileobj(self, name, fileobj, size):
        raise NotImplementedError

    def add_file(self, name, path):
        raise NotImplementedError

    def add_directory_entry(self, name, path):
        raise NotImplementedError

    def add_directory(self, name, path):
        """Add a directory recursively, keeping the structure relative to ``path``.

        Returns:
            Dict mapping the entry name of each added file to its CRC32c.
        """
        checksums = {}
        name = name.rstrip('/')
        self.add_directory_entry(name, path)
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames.sort()
            relpath = osp.relpath(dirpath, start=path)
            prefix = name if relpath == '.' else f'{name}/{relpath.replace(os.sep, "/")}'
            for dirname in dirnames:
                self.add_directory_entry(f'{prefix}/{dirname}', osp.join(dirpath, dirname))
            for filename in sorted(filenames):
                entry_name = f'{prefix}/{filename}'
                checksums[entry_name] = self.add_file(entry_name, osp.join(dirpath, filename))
        return checksums

    def close(self):
        raise NotImplementedError

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class TarWriter(ArchiveWriter):
    """Writes a gzip-compressed tar stream."""

    def __init__(self, fileobj):
        self.tar_file = tarfile.open(fileobj=fileobj, mode='w:gz', compresslevel=COMPRESS_LEVEL)

    def add_bytes(self, name, data):
        tarinfo = tarfile.TarInfo(name)
        tarinfo.size = len(data)
        tarinfo.mtime = time.time()
        tarinfo.mode = 0o644
        self.tar_file.addfile(tarinfo, io.BytesIO(data))
        return crc32c_of_bytes(data)

    def add_fileobj(self, name, fileobj, size):
        tarinfo = tarfile.TarInfo(name)
        tarinfo.size = size
        tarinfo.mtime = time.time()
        tarinfo.mode = 0o644
        reader = ChecksumReader(fileobj)
        self.tar_file.addfile(tarinfo, reader)
        return reader.crc32c

    def add_file(self, name, path):
        tarinfo = self.tar_file.gettarinfo(path, arcname=name)
        with open(path, 'rb') as f:
            reader = ChecksumReader(f)
            self.tar_file.addfile(tarinfo, reader)
        return reader.crc32c

    def add_directory_entry(self, name, path):
        tarinfo = self.tar_file.gettarinfo(path, arcname=name)
        self.tar_file.addfile(tarinfo)

    def close(self):
        self.tar_file.close()


class ZipWriter(ArchiveWriter):
    """Writes a deflate-compressed zip container."""

    def __init__(self, fileobj):
        self.zip_file = zipfile.ZipFile(
            fileobj, mode='w', compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL
        )

    def _new_info(self, name, path=None):
        if path is None:
            zinfo = zipfile.ZipInfo(name, date_time=time.localtime()[:6])
            zinfo.external_attr = 0o644 << 16
        else:
            zinfo = zipfile.ZipInfo.from_file(path, arcname=name)
        zinfo.compress_type = zipfile.ZIP_DEFLATED
        # ZipFile.open(zinfo, 'w') takes the level from the ZipInfo, not from the ZipFile
        if hasattr(zinfo, 'compress_level'):
            zinfo.compress_level = COMPRESS_LEVEL
        else:
            zinfo._compresslevel = COMPRESS_LEVEL
        return zinfo

    def add_bytes(self, name, data):
        self.zip_file.writestr(self._new_info(name), data)
        return crc32c_of_bytes(data)

    def add_fileobj(self, name, fileobj, size):
        zinfo = self._new_info(name)
        zinfo.file_size = size
        with self.zip_file.open(zinfo, mode='w') as dst:
            _, crc = copy_crc32c(fileobj, dst, size=size)
        return crc

    def add_file(self, name, path):
        zinfo = self._new_info(name, path)
        with open(path, 'rb') as src, self.zip_file.open(zinfo, mode='w') as dst:
            _, crc = copy_crc32c(src, dst)
        return crc

    def add_directory_entry(self, name, path):
        zinfo = self._new_info(name, path)
        zinfo.compress_type = zipfile.ZIP_STORED
        self.zip_file.writestr(zinfo, b'')

    def close(self):
        self.zip_file.close()
