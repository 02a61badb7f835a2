"""Command line interface for fileutil with subcommands."""

import argparse
import logging
import os.path as osp
import sys

from ..core.fileutil import FileUtil
from ..exceptions import FileUtilError
from ..formats.archive_formats import SUPPORTED_FORMATS


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='fileutil',
        description='File write/copy helpers, glob hydration and nested archive creation.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log informational messages')
    subparsers = parser.add_subparsers(dest='command', title='commands')

    # archive - build an archive from files and directories
    p = subparsers.add_parser('archive', help='Create a compressed archive from paths')
    p.add_argument('name', type=str, help='Archive name, without the format extension')
    p.add_argument('paths', type=str, nargs='+', help='Files/directories to add')
    p.add_argument(
        '-C', '--directory', type=str, default=None, help='Output directory (default: cwd)'
    )
    p.add_argument(
        '--format',
        type=str,
        default='tar.gz',
        choices=SUPPORTED_FORMATS,
        help='Compression format (default: tar.gz)',
    )

    # hydrate - expand paths and globs into files
    p = subparsers.add_parser('hydrate', help='List the files matched by paths or globs')
    p.add_argument('globs', type=str, nargs='+', help='Paths or glob patterns')

    # common-path
    p = subparsers.add_parser('common-path', help='Print the common leading path')
    p.add_argument('paths', type=str, nargs='*', help='Paths')

    # read-lines
    p = subparsers.add_parser('read-lines', help='Print a numbered line range of a file')
    p.add_argument('file', type=str, help='Text file')
    p.add_argument('start', type=int, help='First line index (0-based, inclusive)')
    p.add_argument('end', type=int, help='End line index (0-based, exclusive)')

    # empty - empty a directory
    p = subparsers.add_parser(
        'empty', help='Remove all contents of a directory (refused for cwd and its ancestors)'
    )
    p.add_argument('directory', type=str, help='Directory to empty')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING, format='%(message)s'
    )

    try:
        if args.command == 'archive':
            _handle_archive(args)
        elif args.command == 'hydrate':
            for path in FileUtil().hydrate_glob(args.globs).files:
                print(path)
        elif args.command == 'common-path':
            print(FileUtil().common_path(*args.paths))
        elif args.command == 'read-lines':
            for line in FileUtil().read_lines(args.file, args.start, args.end):
                print(line)
        elif args.command == 'empty':
            if not FileUtil(relative_path=args.directory).empty_relative_path():
                print(f'Error: refusing to empty {args.directory}', file=sys.stderr)
                sys.exit(1)
    except (FileUtilError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)


def _handle_archive(args):
    """Handle archive command."""
    file_util = FileUtil(relative_path=args.directory, compress_format=args.format)
    file_util.archive_create(args.name)
    for path in args.paths:
        file_util.copy(path, osp.basename(osp.normpath(path)))
    result = file_util.archive_finalize().result()
    print(result.resolved_path)


if __name__ == '__main__':
    main()
