"""Tests for fileutil.core.paths: path resolution, ancestry checks and common path computation."""

import os
import os.path as osp

from hypothesis import given, strategies as st

from fileutil.core.paths import (
    common_mapped_path,
    common_path,
    get_ancestors,
    is_ancestor_or_same,
    resolve_path,
)

segment = st.text(alphabet='abcdefghijklmnopqrstuvwxyz0123456789_-.', min_size=1, max_size=8)


# =============================================================================
# common_path
# =============================================================================


class TestCommonPath:
    def test_absolute_paths(self):
        paths = [
            '/this/is/a/test/path/one/file.js',
            '/this/is/a/test/path/one/file2.js',
            '/this/is/a/test/path/two/file3.js',
            '/this/is/a/test/path/two/file4.js',
            '/this/is/a/test/path/three/file5.js',
        ]
        assert common_path(*paths) == '/this/is/a/test/path/'

    def test_relative_paths(self):
        paths = [
            '../../../this/is/a/test/path/one/file.js',
            '../../../this/is/a/test/path/one/file2.js',
            '../../this/is/a/test/path/two/file3.js',
            '../../this/is/a/test/path/two/file4.js',
            '../../this/is/a/test/path/three/file5.js',
        ]
        assert common_path(*paths) == '../../'

    def test_two_paths(self):
        assert common_path('/a/b/c/x.js', '/a/b/d/y.js') == '/a/b/'

    def test_no_input(self):
        assert common_path() == ''

    def test_nothing_in_common(self):
        assert common_path('a/b', 'c/d') == ''

    def test_shorter_path_stops_scan(self):
        assert common_path('a/b/c/d', 'a/b') == 'a/b/'

    @given(
        st.lists(segment, min_size=1, max_size=4),
        st.lists(st.lists(segment, min_size=1, max_size=3), min_size=2, max_size=5),
    )
    def test_shared_prefix_is_found(self, prefix, suffixes):
        # Make the first differing segment distinct across the first two paths
        suffixes[0] = ['x' + suffixes[0][0]] + suffixes[0][1:]
        suffixes[1] = ['y' + suffixes[1][0]] + suffixes[1][1:]
        paths = ['/'.join(prefix + suffix) for suffix in suffixes]
        assert common_path(*paths) == '/'.join(prefix) + '/'


class TestCommonMappedPath:
    def test_records(self):
        records = [
            {'filePath': '/a/b/c/x.js'},
            {'filePath': '/a/b/d/y.js'},
        ]
        assert common_mapped_path('filePath', *records) == '/a/b/'

    def test_records_without_key_are_skipped(self):
        records = [
            {'filePath': '/a/b/c/x.js'},
            {'other': '/z/z.js'},
            {'filePath': None},
            'not a record',
            {'filePath': '/a/b/d/y.js'},
        ]
        assert common_mapped_path('filePath', *records) == '/a/b/'

    def test_no_records(self):
        assert common_mapped_path('filePath') == ''


# =============================================================================
# Resolution and ancestry
# =============================================================================


def test_resolve_path_against_base(tmp_path):
    assert resolve_path('sub/file.txt', str(tmp_path)) == osp.join(str(tmp_path), 'sub', 'file.txt')


def test_resolve_path_defaults_to_cwd():
    assert resolve_path('file.txt') == osp.join(os.getcwd(), 'file.txt')


def test_get_ancestors_ends_with_path(tmp_path):
    ancestors = list(get_ancestors(str(tmp_path)))
    assert ancestors[0] == osp.abspath(os.sep)
    assert ancestors[-1] == str(tmp_path)


def test_is_ancestor_or_same(tmp_path):
    child = tmp_path / 'a' / 'b'
    child.mkdir(parents=True)
    assert is_ancestor_or_same(str(tmp_path), str(child))
    assert is_ancestor_or_same(str(child), str(child))
    assert not is_ancestor_or_same(str(child), str(tmp_path))
    assert not is_ancestor_or_same(str(tmp_path / 'a2'), str(child))
