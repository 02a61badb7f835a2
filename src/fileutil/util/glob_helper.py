"""Glob hydration: expanding paths and glob patterns into concrete file lists.

Bare paths (without any wildcard) are upgraded to an all-inclusive recursive glob anchored at the
path, so that passing a directory enumerates every file below it.
"""

import glob
import os
import os.path as osp
import re
from typing import NamedTuple

from ..exceptions import InvalidArgumentError

_magic_check = re.compile(r'[*?[]')
_trailing_sep = re.compile(r'[\\/]$')


class HydratedGlob(NamedTuple):
    """Result of :func:`hydrate_glob`."""

    files: list
    """Absolute paths of the matched regular files, in input order."""

    globs: list
    """Effective glob patterns, after bare paths were upgraded."""


def is_glob(pattern: str) -> bool:
    """True if the pattern contains glob wildcard syntax."""
    return _magic_check.search(pattern) is not None


def to_inclusive_glob(path: str) -> str:
    """Turn a bare path into a glob matching every file below it.

    An existing trailing separator is kept (whether ``/`` or ``\\``), otherwise ``os.sep`` is
    inserted.

        >>> to_inclusive_glob('src/')
        'src/**/*'
    """
    m = _trailing_sep.search(path)
    sep = m.group(0) if m is not None else os.sep
    if path.endswith(sep):
        return f'{path}**{sep}*'
    return f'{path}{sep}**{sep}*'


def hydrate_glob(globs):
    """Expand a path / glob pattern or a list of them into a list of files.

    Args:
        globs: A string or a list (or tuple) of strings. Entries which are not globs are converted
            into all-inclusive recursive globs.

    Returns:
        A :class:`HydratedGlob` with the matched files and the effective glob patterns.

    Raises:
        InvalidArgumentError: If ``globs`` is neither a string nor a sequence of strings.
    """
    if isinstance(globs, str):
        entries = [globs]
    elif isinstance(globs, (list, tuple)):
        entries = list(globs)
    else:
        raise InvalidArgumentError("'globs' is not a 'string' or a 'list'.")

    for entry in entries:
        if not isinstance(entry, str):
            raise InvalidArgumentError(f"'globs' entry is not a 'string': {entry!r}")

    actual_globs = []
    files = []
    for entry in entries:
        if not is_glob(entry):
            entry = to_inclusive_glob(entry)
        actual_globs.append(entry)
        files.extend(sorted(glob.glob(osp.abspath(entry), recursive=True)))

    files = [path for path in files if osp.isfile(path)]
    return HydratedGlob(files, actual_globs)
