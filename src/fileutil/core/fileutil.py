import logging
import os
import os.path as osp
import shutil
from concurrent.futures import Future
from typing import Optional

from ..util import misc as fileutil_misc
from ..util.glob_helper import HydratedGlob, hydrate_glob
from .archive_stack import ArchiveStack
from .options import FileUtilOptions
from .paths import common_mapped_path, common_path, is_ancestor_or_same, resolve_path

logger = logging.getLogger(__name__)


class FileUtil:
    """File write/copy helpers that can transparently target a stack of archives.

    While an archive is open (see :meth:`archive_create`), :meth:`write_file` and :meth:`copy` add
    entries to the archive on top of the stack instead of touching the filesystem. Archives opened
    while another one is active are by default folded into their parent as a single entry when
    finalized.

    Args:
        options: Mapping of options, see :class:`FileUtilOptions`.
        executor: Optional :class:`concurrent.futures.Executor` used to finalize archives. If None,
            archives are finalized synchronously.
        **kwargs: Options given as keyword arguments, merged over ``options``.

    Examples:

        >>> fu = FileUtil(relative_path='out')
        >>> fu.archive_create('bundle')
        >>> fu.write_file('print("hi")', 'main.py')
        >>> fu.archive_finalize().result()  # doctest: +SKIP
        ChildArchive(resolved_path='.../out/bundle.tar.gz', logical_path='bundle.tar.gz', ...)
    """

    def __init__(self, options=None, executor=None, **kwargs):
        self._options = FileUtilOptions()
        self.set_options(options)
        self.set_options(kwargs)
        self.archive_stack = ArchiveStack(executor=executor)

    ## Options
    def get_options(self) -> dict:
        """Return a copy of the options."""
        return self._options.as_dict()

    def set_options(self, options=None):
        """Set optional parameters.

        Raises:
            InvalidArgumentError: If ``options`` is not a mapping.
        """
        self._options.set(options)

    ## Archives
    def archive_create(self, dest_path, add_to_parent=True, silent=False):
        """Create a compressed archive relative to the output destination.

        All subsequent write and copy operations add to this archive until
        :meth:`archive_finalize` is called.

        Args:
            dest_path: Destination path and file name; the compress format extension is appended.
            add_to_parent: If a parent archive exists, add this archive to it on finalize and
                delete the local file.
            silent: If True, nothing is logged.

        Raises:
            UnsupportedFormatError: If the configured compress format is unknown.
        """
        if not silent:
            self._log(f'creating archive: {dest_path}')

        self.archive_stack.compress_format = self._options.compress_format
        self.archive_stack.relative_path = self._options.relative_path
        self.archive_stack.begin(dest_path, add_to_parent=add_to_parent)

    def archive_finalize(self, silent=False) -> Future:
        """Finalize the active archive.

        Returns:
            A future that resolves once the archive is written, to a
            :class:`fileutil.core.archive_stack.ChildArchive`, or to None if no archive was
            active.
        """
        session = self.archive_stack.top()
        if session is None:
            self._log('No active archive to finalize.')
        elif not silent:
            self._log(f'finalizing archive: {session.logical_path}')
        return self.archive_stack.finalize()

    ## Writing and copying
    def write_file(self, file_data, file_name, silent=False, encoding=None):
        """Output a file relative to the output destination, or into the active archive.

        Args:
            file_data: Text or bytes-like data.
            file_name: Path relative to ``relative_path``, or the entry name in the archive.
            silent: If True, nothing is logged.
            encoding: Encoding of text data; defaults to the ``encoding`` option.
        """
        if not silent:
            self._log(f'output: {file_name}')

        data = fileutil_misc.to_bytes(file_data, encoding or self._options.encoding)

        session = self.archive_stack.top()
        if session is not None:
            session.add_bytes(data, file_name)
            return

        target_path = self._resolve(file_name)
        os.makedirs(osp.dirname(target_path), exist_ok=True)
        with open(target_path, 'wb') as f:
            f.write(data)

    def copy(self, src_path, dest_path, silent=False):
        """Copy a source file or directory relative to the output destination, or into the active
        archive.

        Args:
            src_path: Source file or directory.
            dest_path: Destination path relative to ``relative_path``, or the entry name.
            silent: If True, nothing is logged.
        """
        if not silent:
            self._log(f'output: {dest_path}')

        session = self.archive_stack.top()
        if session is not None:
            if not osp.exists(src_path):
                raise FileNotFoundError(src_path)
            session.add_path(src_path, dest_path)
            return

        target_path = self._resolve(dest_path)
        if osp.isdir(src_path):
            shutil.copytree(src_path, target_path, dirs_exist_ok=True)
        else:
            os.makedirs(osp.dirname(target_path), exist_ok=True)
            shutil.copy2(src_path, target_path)

    ## Reading
    def read_lines(self, file_path, line_start, line_end) -> list:
        """Read lines ``[line_start, line_end)`` of a file as ``'<line number>| <line>'``."""
        return fileutil_misc.read_lines(
            file_path, line_start, line_end, encoding=self._options.encoding
        )

    def hydrate_glob(self, globs) -> HydratedGlob:
        return hydrate_glob(globs)

    def common_path(self, *paths) -> str:
        return common_path(*paths)

    def common_mapped_path(self, key, *records) -> str:
        return common_mapped_path(key, *records)

    ## Cleanup
    def empty_relative_path(self) -> bool:
        """Remove all contents of the ``relative_path`` directory.

        Refused when ``relative_path`` is the current working directory or one of its ancestors.

        Returns:
            True if the directory was emptied, False if the operation was refused.
        """
        base = self._resolve('.')
        if is_ancestor_or_same(base, os.getcwd()):
            self._log(
                f'Refusing to empty {base}: it is the current working directory or an ancestor'
            )
            return False

        os.makedirs(base, exist_ok=True)
        with os.scandir(base) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    shutil.rmtree(entry.path)
                else:
                    os.remove(entry.path)
        return True

    ## Command handlers
    def command_handlers(self, prepend: Optional[str] = 'typhonjs') -> dict:
        """Map command names to the bound methods that handle them.

        Names have the form ``'<prepend>:util:file:<action>'``, or ``'util:file:<action>'`` if
        ``prepend`` is empty.
        """
        prefix = f'{prepend}:util:file' if prepend else 'util:file'
        return {
            f'{prefix}:archive:create': self.archive_create,
            f'{prefix}:archive:finalize': self.archive_finalize,
            f'{prefix}:common:mapped:path': self.common_mapped_path,
            f'{prefix}:common:path': self.common_path,
            f'{prefix}:copy': self.copy,
            f'{prefix}:empty:relative:path': self.empty_relative_path,
            f'{prefix}:get:options': self.get_options,
            f'{prefix}:hydrate:glob': self.hydrate_glob,
            f'{prefix}:read:lines': self.read_lines,
            f'{prefix}:set:options': self.set_options,
            f'{prefix}:write': self.write_file,
        }

    def _resolve(self, path):
        return resolve_path(path, self._options.relative_path)

    def _log(self, message):
        logger.info('%s', message)
        if self._options.log_event is not None:
            self._options.log_event(message)
