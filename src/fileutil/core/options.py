"""Options shared by all operations of a :class:`fileutil.FileUtil` instance."""

import os
from collections.abc import Mapping

from ..exceptions import InvalidArgumentError

DEFAULT_COMPRESS_FORMAT = 'tar.gz'
DEFAULT_ENCODING = 'utf8'


class FileUtilOptions:
    """Optional parameters of a FileUtil instance.

    Args:
        compress_format: Container format of created archives, ``'tar.gz'`` or ``'zip'``.
        relative_path: Base directory that relative destinations resolve against. If None, the
            current working directory is used.
        lock_relative: Once True, ``relative_path`` and ``lock_relative`` can no longer change.
        log_event: Optional callable receiving each informational message as a string.
        encoding: Default text encoding of :meth:`fileutil.FileUtil.write_file`.
    """

    __slots__ = ('compress_format', 'relative_path', 'lock_relative', 'log_event', 'encoding')

    def __init__(self):
        self.compress_format = DEFAULT_COMPRESS_FORMAT
        self.relative_path = None
        self.lock_relative = False
        self.log_event = None
        self.encoding = DEFAULT_ENCODING

    def set(self, options=None):
        """Update options from a mapping. Values of the wrong type are ignored.

        Raises:
            InvalidArgumentError: If ``options`` is not a mapping.
        """
        if options is None:
            return
        if not isinstance(options, Mapping):
            raise InvalidArgumentError("'options' is not a mapping.")

        relative_path = options.get('relative_path')
        if not self.lock_relative and isinstance(relative_path, (str, os.PathLike)):
            self.relative_path = os.fspath(relative_path)

        # Only set `lock_relative` if it has not already been set to True
        lock_relative = options.get('lock_relative')
        if not self.lock_relative and isinstance(lock_relative, bool):
            self.lock_relative = lock_relative

        if isinstance(options.get('compress_format'), str):
            self.compress_format = options['compress_format']
        if callable(options.get('log_event')):
            self.log_event = options['log_event']
        if isinstance(options.get('encoding'), str):
            self.encoding = options['encoding']

    def as_dict(self):
        return {name: getattr(self, name) for name in self.__slots__}
