"""Path utilities: resolving against a base directory and common path computation."""

import os
import os.path as osp
from collections.abc import Mapping


def resolve_path(path, relative_path=None):
    """Resolve a path against the configured base directory.

    Args:
        path: The path as given by the caller (str or Path).
        relative_path: Base directory. If None, the current working directory is used.

    Returns:
        The absolute, normalized path.
    """
    path = os.fspath(path)
    if relative_path is None:
        return osp.abspath(path)
    return osp.abspath(osp.join(os.fspath(relative_path), path))


def get_ancestors(path):
    """Yield all ancestor paths of an absolute path from the root down to and including path
    itself."""
    path = osp.abspath(path)
    parent = osp.dirname(path)
    if parent != path:
        yield from get_ancestors(parent)
    yield path


def is_ancestor_or_same(base, path):
    """True if ``base`` is the same directory as ``path`` or one of its ancestors."""
    base = osp.realpath(base)
    return any(base == ancestor for ancestor in get_ancestors(osp.realpath(path)))


def common_path(*paths):
    """Find the longest leading sequence of path segments shared by all paths.

    Paths are split on ``'/'`` and compared segment by segment from the left. The scan stops at
    the first segment where the paths disagree or where one of them runs out of segments.

    Returns:
        The common segments joined with a trailing ``'/'``, or ``''`` if there is no input or no
        common segment.

    Examples:

        >>> common_path('/a/b/c/x.js', '/a/b/d/y.js')
        '/a/b/'
        >>> common_path('../../a/x.js', '../../../a/y.js')
        '../../'
    """
    if not paths:
        return ''

    split_paths = [p.split('/') for p in paths]
    shortest = min(len(parts) for parts in split_paths)

    common = []
    for i in range(shortest):
        segment = split_paths[0][i]
        if any(parts[i] != segment for parts in split_paths[1:]):
            break
        common.append(segment)

    if not common:
        return ''
    return '/'.join(common) + '/'


def common_mapped_path(key, *records):
    """Like :func:`common_path`, over the values stored at ``key`` in each record.

    Records that are not mappings, lack the key, or hold a non-string value are skipped.
    """
    paths = [
        record[key]
        for record in records
        if isinstance(record, Mapping) and isinstance(record.get(key), str)
    ]
    return common_path(*paths)
